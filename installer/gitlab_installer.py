# installer/gitlab_installer.py
# -*- coding: utf-8 -*-
"""
Deploys GitLab EE as a docker-compose stack.
"""

from typing import Any, Dict, List

from common.file_utils import ensure_directory
from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry

GITLAB_ENV_TEMPLATE = """\
# GitLab Configuration
GITLAB_HOSTNAME={hostname}
GITLAB_VERSION={version}
GITLAB_HOME={home}
GITLAB_HTTP_PORT={http_port}
GITLAB_HTTPS_PORT={https_port}
GITLAB_SSH_PORT={ssh_port}

# GitLab URLs
GITLAB_EXTERNAL_URL={external_url}
"""

GITLAB_COMPOSE_TEMPLATE = """\
version: '3.8'
services:
  gitlab:
    image: gitlab/gitlab-ee:${{GITLAB_VERSION}}
    container_name: gitlab
    restart: unless-stopped
    hostname: '${{GITLAB_HOSTNAME}}'
    environment:
      GITLAB_OMNIBUS_CONFIG: |
        external_url '${{GITLAB_EXTERNAL_URL}}'
        gitlab_rails['gitlab_shell_ssh_port'] = ${{GITLAB_SSH_PORT}}
        # Disable built-in nginx HTTPS to avoid port conflicts
        nginx['listen_port'] = 80
        nginx['listen_https'] = false
        # Configure GitLab to work behind reverse proxy
        gitlab_rails['trusted_proxies'] = ['172.16.0.0/12', '192.168.0.0/16', '10.0.0.0/8']
        gitlab_rails['gitlab_default_theme'] = 2
    ports:
      - '${{GITLAB_HTTP_PORT}}:80'
      - '${{GITLAB_HTTPS_PORT}}:443'
      - '${{GITLAB_SSH_PORT}}:22'
    volumes:
      - '${{GITLAB_HOME}}/config:/etc/gitlab'
      - '${{GITLAB_HOME}}/logs:/var/log/gitlab'
      - '${{GITLAB_HOME}}/data:/var/opt/gitlab'
    shm_size: '256m'
    networks:
      - gitlab-network

networks:
  gitlab-network:
    driver: bridge
"""

GITLAB_README_TEMPLATE = """\
# GitLab Docker Setup

## Configuration
- **Hostname**: {hostname}
- **Version**: {version}
- **HTTP Port**: {http_port}
- **HTTPS Port**: {https_port}
- **SSH Port**: {ssh_port}

## Usage

### Start GitLab
```bash
{compose} up -d
```

### Stop GitLab
```bash
{compose} down
```

### View logs
```bash
{compose} logs -f
```

### Access GitLab
- Web interface: https://{hostname}:{https_port} or http://{hostname}:{http_port}
- SSH: git@{hostname}:{ssh_port}

### Initial Setup
1. Wait for GitLab to start (may take several minutes)
2. Get initial root password: `docker exec -it gitlab grep 'Password:' /etc/gitlab/initial_root_password`
3. Login with username 'root' and the password from step 2
4. Change the root password immediately after first login

## Data Persistence
GitLab data is stored in: {home}
- Configuration: {home}/config
- Logs: {home}/logs
- Data: {home}/data
"""


@ComponentRegistry.register(
    "gitlab",
    metadata={
        "display_name": "GitLab",
        "description": "GitLab DevOps platform (docker-compose).",
    },
)
class GitlabComponent(ComposeStackComponent):
    directory_name = "gitlab"
    settings_attr = "gitlab"
    env_template = GITLAB_ENV_TEMPLATE
    compose_template = GITLAB_COMPOSE_TEMPLATE
    readme_template = GITLAB_README_TEMPLATE

    def build_context(self, parameters, secrets) -> Dict[str, Any]:
        context = super().build_context(parameters, secrets)
        context["external_url"] = parameters.external_url
        return context

    def prepare_host(self, context: Dict[str, Any]) -> bool:
        try:
            ensure_directory(
                context["home"],
                self.app_settings,
                self.logger,
                description="Creating GitLab data directory",
            )
        except OSError as e:
            return self._fail(
                f"Failed to create GitLab data directory {context['home']}: {e}"
            )
        return True

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        return [
            "GitLab may take a few minutes to start. You can access it at:",
            f"  - HTTP: http://{context['hostname']}:{context['http_port']}",
            f"  - HTTPS: https://{context['hostname']}:{context['https_port']}",
            "Initial root password: docker exec -it gitlab grep 'Password:' /etc/gitlab/initial_root_password",
        ]
