# installer/zabbix_installer.py
# -*- coding: utf-8 -*-
"""
Deploys Zabbix (server, web frontend, Java gateway and MySQL) as a
docker-compose stack.
"""

from typing import Any, Dict, List

from common.system_utils import generate_secret
from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry
from settings.config_models import (
    ZABBIX_DEMO_MYSQL_PASSWORD,
    ZABBIX_DEMO_MYSQL_ROOT_PASSWORD,
)

ZABBIX_ENV_TEMPLATE = """\
# Zabbix Configuration
ZABBIX_WEB_PORT={web_port}
ZABBIX_SERVER_PORT={server_port}
ZABBIX_TIMEZONE={timezone}

# MySQL Configuration
MYSQL_DATABASE={mysql_database}
MYSQL_USER={mysql_user}
MYSQL_PASSWORD={mysql_password}
MYSQL_ROOT_PASSWORD={mysql_root_password}

# Docker Network
ZABBIX_NETWORK_SUBNET={network_subnet}
ZABBIX_NETWORK_IPRANGE={network_iprange}

# Zabbix Images
ZABBIX_VERSION={version}
MYSQL_VERSION={mysql_version}
"""

ZABBIX_COMPOSE_TEMPLATE = """\
version: '3.8'

services:
  mysql-server:
    image: mysql:${{MYSQL_VERSION}}
    container_name: zabbix-mysql-server
    restart: unless-stopped
    environment:
      MYSQL_DATABASE: ${{MYSQL_DATABASE}}
      MYSQL_USER: ${{MYSQL_USER}}
      MYSQL_PASSWORD: ${{MYSQL_PASSWORD}}
      MYSQL_ROOT_PASSWORD: ${{MYSQL_ROOT_PASSWORD}}
    command:
      - mysqld
      - --character-set-server=utf8
      - --collation-server=utf8_bin
      - --default-authentication-plugin=mysql_native_password
    volumes:
      - zabbix-mysql-data:/var/lib/mysql
    networks:
      - zabbix-net

  zabbix-java-gateway:
    image: zabbix/zabbix-java-gateway:${{ZABBIX_VERSION}}
    container_name: zabbix-java-gateway
    restart: unless-stopped
    networks:
      - zabbix-net

  zabbix-server:
    image: zabbix/zabbix-server-mysql:${{ZABBIX_VERSION}}
    container_name: zabbix-server-mysql
    restart: unless-stopped
    environment:
      DB_SERVER_HOST: mysql-server
      MYSQL_DATABASE: ${{MYSQL_DATABASE}}
      MYSQL_USER: ${{MYSQL_USER}}
      MYSQL_PASSWORD: ${{MYSQL_PASSWORD}}
      MYSQL_ROOT_PASSWORD: ${{MYSQL_ROOT_PASSWORD}}
      ZBX_JAVAGATEWAY: zabbix-java-gateway
    ports:
      - "${{ZABBIX_SERVER_PORT}}:10051"
    volumes:
      - zabbix-server-data:/var/lib/zabbix
    networks:
      - zabbix-net
    depends_on:
      - mysql-server
      - zabbix-java-gateway

  zabbix-web:
    image: zabbix/zabbix-web-nginx-mysql:${{ZABBIX_VERSION}}
    container_name: zabbix-web-nginx-mysql
    restart: unless-stopped
    environment:
      DB_SERVER_HOST: mysql-server
      MYSQL_DATABASE: ${{MYSQL_DATABASE}}
      MYSQL_USER: ${{MYSQL_USER}}
      MYSQL_PASSWORD: ${{MYSQL_PASSWORD}}
      MYSQL_ROOT_PASSWORD: ${{MYSQL_ROOT_PASSWORD}}
      ZBX_SERVER_HOST: zabbix-server
      PHP_TZ: ${{ZABBIX_TIMEZONE}}
    ports:
      - "${{ZABBIX_WEB_PORT}}:8080"
    volumes:
      - zabbix-web-data:/etc/ssl/nginx
    networks:
      - zabbix-net
    depends_on:
      - mysql-server
      - zabbix-server

networks:
  zabbix-net:
    driver: bridge
    ipam:
      config:
        - subnet: ${{ZABBIX_NETWORK_SUBNET}}
          ip_range: ${{ZABBIX_NETWORK_IPRANGE}}

volumes:
  zabbix-mysql-data:
  zabbix-server-data:
  zabbix-web-data:
"""

ZABBIX_README_TEMPLATE = """\
# Zabbix Docker Setup

## Configuration
- **Web Port**: {web_port}
- **Server Port**: {server_port}
- **Timezone**: {timezone}
- **MySQL Database**: {mysql_database}
- **MySQL User**: {mysql_user}

## Usage

### Start Zabbix
```bash
{compose} up -d
```

### Stop Zabbix
```bash
{compose} down
```

### View logs
```bash
# All services
{compose} logs -f

# Specific service
{compose} logs -f zabbix-server
{compose} logs -f zabbix-web
{compose} logs -f mysql-server
```

### Access Zabbix
- Web interface: http://localhost:{web_port}
- Default login: **Admin** / **zabbix**

### Initial Setup
1. Wait for all containers to start (may take several minutes)
2. Access the web interface at http://localhost:{web_port}
3. Login with username 'Admin' and password 'zabbix'
4. Change the admin password immediately after first login
5. Configure your first hosts and monitoring items

### Database Access
- **MySQL Password**: See .env file
- **MySQL Root Password**: See .env file
- Connect to database: `{compose} exec mysql-server mysql -u {mysql_user} -p {mysql_database}`

### Monitoring Agents
To monitor other hosts, install Zabbix agent on target systems and configure them to connect to this server on port {server_port}.

### Data Persistence
Zabbix data is stored in Docker volumes:
- MySQL data: zabbix-mysql-data
- Server data: zabbix-server-data
- Web data: zabbix-web-data

### Troubleshooting
- Check container status: `{compose} ps`
- View detailed logs: `{compose} logs [service-name]`
- Restart services: `{compose} restart [service-name]`
"""


@ComponentRegistry.register(
    "zabbix",
    metadata={
        "display_name": "Zabbix",
        "description": "Zabbix monitoring with MySQL backend (docker-compose).",
    },
)
class ZabbixComponent(ComposeStackComponent):
    directory_name = "zabbix"
    settings_attr = "zabbix"
    env_template = ZABBIX_ENV_TEMPLATE
    compose_template = ZABBIX_COMPOSE_TEMPLATE
    readme_template = ZABBIX_README_TEMPLATE

    def generate_secrets(self) -> Dict[str, str]:
        if self.dry_run:
            return {
                "mysql_password": ZABBIX_DEMO_MYSQL_PASSWORD,
                "mysql_root_password": ZABBIX_DEMO_MYSQL_ROOT_PASSWORD,
            }
        return {
            "mysql_password": generate_secret(),
            "mysql_root_password": generate_secret(),
        }

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        return [
            f"Zabbix web interface: http://localhost:{context['web_port']}",
            f"Zabbix server port: {context['server_port']}",
            "Default login: Admin / zabbix",
            "MySQL credentials saved in .env file",
        ]
