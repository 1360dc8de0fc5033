# installer/nginx_installer.py
# -*- coding: utf-8 -*-
"""
Deploys the official Nginx image as a docker-compose stack.
"""

from typing import Any, Dict, List

from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry

NGINX_ENV_TEMPLATE = """\
# Nginx Configuration
NGINX_PORT={port}
NGINX_VERSION={version}
NGINX_CONTAINER={container_name}
"""

NGINX_COMPOSE_TEMPLATE = """\
version: '3.8'

services:
  nginx:
    image: nginx:${{NGINX_VERSION}}
    container_name: ${{NGINX_CONTAINER}}
    restart: unless-stopped
    ports:
      - "${{NGINX_PORT}}:80"
    volumes:
      - nginx-html:/usr/share/nginx/html
      - nginx-conf:/etc/nginx/conf.d
    networks:
      - nginx-network

networks:
  nginx-network:
    driver: bridge

volumes:
  nginx-html:
  nginx-conf:
"""

NGINX_README_TEMPLATE = """\
# Nginx Docker Setup

## Configuration
- **Port**: {port}
- **Image**: nginx:{version}
- **Container**: {container_name}

## Usage

### Start Nginx
```bash
{compose} up -d
```

### Stop Nginx
```bash
{compose} down
```

### View logs
```bash
{compose} logs -f
```

### Access Nginx
- Web server: http://localhost:{port}

### Data Persistence
Nginx content and configuration are stored in Docker volumes:
- Site content: nginx-html
- Server configuration: nginx-conf

### Troubleshooting
- Check container status: `{compose} ps`
- Test configuration: `{compose} exec nginx nginx -t`
- Reload configuration: `{compose} exec nginx nginx -s reload`
"""


@ComponentRegistry.register(
    "nginx",
    metadata={
        "display_name": "Nginx",
        "description": "Nginx web server and reverse proxy (docker-compose).",
    },
)
class NginxComponent(ComposeStackComponent):
    directory_name = "nginx"
    settings_attr = "nginx"
    env_template = NGINX_ENV_TEMPLATE
    compose_template = NGINX_COMPOSE_TEMPLATE
    readme_template = NGINX_README_TEMPLATE

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        return [f"Nginx is running on port {context['port']}"]
