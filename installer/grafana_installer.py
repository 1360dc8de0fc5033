# installer/grafana_installer.py
# -*- coding: utf-8 -*-
"""
Deploys Grafana Enterprise as a docker-compose stack.
"""

from typing import Any, Dict, List

from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry

GRAFANA_ENV_TEMPLATE = """\
# Grafana Configuration
GRAFANA_PORT={port}
GF_SECURITY_ADMIN_PASSWORD={admin_password}
GF_USERS_DEFAULT_ORG_NAME={org_name}

# Grafana Settings
GF_INSTALL_PLUGINS={plugins}
GF_USERS_ALLOW_SIGN_UP=false
GF_USERS_ALLOW_ORG_CREATE=false
GF_AUTH_ANONYMOUS_ENABLED=false

# Data persistence
GRAFANA_DATA_PATH=/var/lib/grafana
"""

GRAFANA_COMPOSE_TEMPLATE = """\
version: '3.8'

services:
  grafana:
    image: grafana/grafana-enterprise:latest
    container_name: grafana
    restart: unless-stopped
    ports:
      - "${{GRAFANA_PORT}}:3000"
    environment:
      - GF_SECURITY_ADMIN_PASSWORD=${{GF_SECURITY_ADMIN_PASSWORD}}
      - GF_USERS_DEFAULT_ORG_NAME=${{GF_USERS_DEFAULT_ORG_NAME}}
      - GF_INSTALL_PLUGINS=${{GF_INSTALL_PLUGINS}}
      - GF_USERS_ALLOW_SIGN_UP=${{GF_USERS_ALLOW_SIGN_UP}}
      - GF_USERS_ALLOW_ORG_CREATE=${{GF_USERS_ALLOW_ORG_CREATE}}
      - GF_AUTH_ANONYMOUS_ENABLED=${{GF_AUTH_ANONYMOUS_ENABLED}}
    volumes:
      - grafana-storage:${{GRAFANA_DATA_PATH}}
      - grafana-config:/etc/grafana
      - grafana-logs:/var/log/grafana
    networks:
      - grafana-network
    user: "472"  # grafana user

networks:
  grafana-network:
    driver: bridge

volumes:
  grafana-storage:
  grafana-config:
  grafana-logs:
"""

GRAFANA_README_TEMPLATE = """\
# Grafana Docker Setup

## Configuration
- **Port**: {port}
- **Admin Password**: See .env file
- **Organization**: {org_name}

## Usage

### Start Grafana
```bash
{compose} up -d
```

### Stop Grafana
```bash
{compose} down
```

### View logs
```bash
{compose} logs -f
```

### Access Grafana
- Web interface: http://localhost:{port}
- Login: **admin** / password from GF_SECURITY_ADMIN_PASSWORD in .env

### Initial Setup
1. Access the web interface at http://localhost:{port}
2. Login with username 'admin' and the configured admin password
3. Change the admin password if using the default
4. Configure your first data source (Prometheus, InfluxDB, etc.)
5. Import or create dashboards

### Pre-installed Plugins
{plugin_list}

### Data Sources
Common data sources you can configure:
- **Prometheus**: For metrics from Prometheus server
- **InfluxDB**: For time series data
- **MySQL/PostgreSQL**: For relational database queries
- **Elasticsearch**: For log analysis
- **Zabbix**: Connect to your Zabbix monitoring system

### Data Persistence
Grafana data is stored in Docker volumes:
- Storage: grafana-storage (dashboards, users, etc.)
- Config: grafana-config (configuration files)
- Logs: grafana-logs (application logs)

### Troubleshooting
- Check container status: `{compose} ps`
- View logs: `{compose} logs grafana`
- Restart service: `{compose} restart grafana`
- Access container: `{compose} exec grafana /bin/bash`

### Security Notes
- Change default admin password immediately
- Configure proper authentication (LDAP, OAuth, etc.) for production
- Set up SSL/TLS for secure access
- Review user permissions and roles
"""


@ComponentRegistry.register(
    "grafana",
    metadata={
        "display_name": "Grafana",
        "description": "Grafana dashboards and analytics (docker-compose).",
    },
)
class GrafanaComponent(ComposeStackComponent):
    directory_name = "grafana"
    settings_attr = "grafana"
    env_template = GRAFANA_ENV_TEMPLATE
    compose_template = GRAFANA_COMPOSE_TEMPLATE
    readme_template = GRAFANA_README_TEMPLATE

    def build_context(self, parameters, secrets) -> Dict[str, Any]:
        context = super().build_context(parameters, secrets)
        plugins = [p.strip() for p in parameters.plugins.split(",") if p.strip()]
        context["plugin_list"] = (
            "\n".join(f"- {plugin}" for plugin in plugins) or "- none"
        )
        return context

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        return [
            f"Grafana web interface: http://localhost:{context['port']}",
            "Login: admin / password from .env (GF_SECURITY_ADMIN_PASSWORD)",
        ]
