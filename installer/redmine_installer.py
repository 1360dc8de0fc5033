# installer/redmine_installer.py
# -*- coding: utf-8 -*-
"""
Deploys Redmine with a PostgreSQL or MySQL database as a docker-compose stack.
"""

from typing import Any, Dict, List

from common.system_utils import generate_secret
from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry
from settings.cli_handler import prompt_choice
from settings.config_models import REDMINE_DEMO_DB_PASSWORD

# Per-backend values substituted into the templates.
DATABASE_PROFILES: Dict[str, Dict[str, str]] = {
    "postgres": {
        "db_image": "postgres:15",
        "db_container": "redmine-postgres",
        "db_label": "PostgreSQL",
        "db_volume": "redmine-postgres-data",
        "db_connect_cmd": "{compose} exec postgres psql -U {db_user} -d {db_name}",
        "db_backup_cmd": "{compose} exec postgres pg_dump -U {db_user} {db_name} > redmine_backup.sql",
    },
    "mysql": {
        "db_image": "mysql:8.0",
        "db_container": "redmine-mysql",
        "db_label": "MySQL",
        "db_volume": "redmine-mysql-data",
        "db_connect_cmd": "{compose} exec mysql mysql -u {db_user} -p {db_name}",
        "db_backup_cmd": "{compose} exec mysql mysqldump -u {db_user} -p {db_name} > redmine_backup.sql",
    },
}

DATABASE_CHOICES = [
    ("postgres", "PostgreSQL (recommended)"),
    ("mysql", "MySQL"),
]

REDMINE_ENV_TEMPLATE = """\
# Redmine Configuration
REDMINE_PORT={port}
REDMINE_VERSION={version}

# Database Configuration
DB_TYPE={database}
DB_IMAGE={db_image}
DB_CONTAINER={db_container}
DB_PASSWORD={db_password}
DB_USER={db_user}
DB_NAME={db_name}

# Network Configuration
REDMINE_NETWORK=redmine-network
"""

REDMINE_POSTGRES_COMPOSE_TEMPLATE = """\
version: '3.8'

services:
  postgres:
    image: ${{DB_IMAGE}}
    container_name: ${{DB_CONTAINER}}
    restart: unless-stopped
    environment:
      POSTGRES_PASSWORD: ${{DB_PASSWORD}}
      POSTGRES_USER: ${{DB_USER}}
      POSTGRES_DB: ${{DB_NAME}}
    volumes:
      - redmine-postgres-data:/var/lib/postgresql/data
    networks:
      - redmine-network

  redmine:
    image: redmine:${{REDMINE_VERSION}}
    container_name: redmine
    restart: unless-stopped
    ports:
      - "${{REDMINE_PORT}}:3000"
    environment:
      REDMINE_DB_POSTGRES: ${{DB_CONTAINER}}
      REDMINE_DB_USERNAME: ${{DB_USER}}
      REDMINE_DB_PASSWORD: ${{DB_PASSWORD}}
      REDMINE_DB_DATABASE: ${{DB_NAME}}
    volumes:
      - redmine-data:/usr/src/redmine/files
      - redmine-plugins:/usr/src/redmine/plugins
      - redmine-themes:/usr/src/redmine/public/themes
    networks:
      - redmine-network
    depends_on:
      - postgres

networks:
  redmine-network:
    driver: bridge

volumes:
  redmine-postgres-data:
  redmine-data:
  redmine-plugins:
  redmine-themes:
"""

REDMINE_MYSQL_COMPOSE_TEMPLATE = """\
version: '3.8'

services:
  mysql:
    image: ${{DB_IMAGE}}
    container_name: ${{DB_CONTAINER}}
    restart: unless-stopped
    environment:
      MYSQL_ROOT_PASSWORD: ${{DB_PASSWORD}}
      MYSQL_DATABASE: ${{DB_NAME}}
      MYSQL_USER: ${{DB_USER}}
      MYSQL_PASSWORD: ${{DB_PASSWORD}}
    command: --default-authentication-plugin=mysql_native_password
    volumes:
      - redmine-mysql-data:/var/lib/mysql
    networks:
      - redmine-network

  redmine:
    image: redmine:${{REDMINE_VERSION}}
    container_name: redmine
    restart: unless-stopped
    ports:
      - "${{REDMINE_PORT}}:3000"
    environment:
      REDMINE_DB_MYSQL: ${{DB_CONTAINER}}
      REDMINE_DB_USERNAME: ${{DB_USER}}
      REDMINE_DB_PASSWORD: ${{DB_PASSWORD}}
      REDMINE_DB_DATABASE: ${{DB_NAME}}
    volumes:
      - redmine-data:/usr/src/redmine/files
      - redmine-plugins:/usr/src/redmine/plugins
      - redmine-themes:/usr/src/redmine/public/themes
    networks:
      - redmine-network
    depends_on:
      - mysql

networks:
  redmine-network:
    driver: bridge

volumes:
  redmine-mysql-data:
  redmine-data:
  redmine-plugins:
  redmine-themes:
"""

REDMINE_README_TEMPLATE = """\
# Redmine Docker Setup

## Configuration
- **Port**: {port}
- **Database**: {db_label}
- **Database User**: {db_user}
- **Database Name**: {db_name}

## Usage

### Start Redmine
```bash
{compose} up -d
```

### Stop Redmine
```bash
{compose} down
```

### View logs
```bash
# All services
{compose} logs -f

# Specific service
{compose} logs -f redmine
{compose} logs -f {database}
```

### Access Redmine
- Web interface: http://localhost:{port}
- Default login: **admin** / **admin**

### Initial Setup
1. Wait for all containers to start (may take several minutes)
2. Access the web interface at http://localhost:{port}
3. Login with username 'admin' and password 'admin'
4. Change the admin password immediately after first login
5. Configure your first project and users

### Database Access
- **Database Password**: See .env file
- **Database Connection**: `{db_connect_cmd}`

### Customization
- **Plugins**: Place plugins in the redmine-plugins volume
- **Themes**: Place themes in the redmine-themes volume
- **Files**: User uploaded files are stored in redmine-data volume

### Data Persistence
Redmine data is stored in Docker volumes:
- Application data: redmine-data
- Plugins: redmine-plugins
- Themes: redmine-themes
- {db_label} data: {db_volume}

### Backup
To backup your Redmine installation:
```bash
# Backup database
{db_backup_cmd}

# Backup files
docker run --rm -v redmine-data:/data -v $(pwd):/backup alpine tar czf /backup/redmine_files_backup.tar.gz -C /data .
```

### Troubleshooting
- Check container status: `{compose} ps`
- View detailed logs: `{compose} logs [service-name]`
- Restart services: `{compose} restart [service-name]`
- Access container: `{compose} exec redmine /bin/bash`

### Common Issues
1. **Database connection errors**: Wait longer for database to initialize
2. **Permission issues**: Check file permissions on mounted volumes
3. **Plugin issues**: Restart Redmine after installing plugins
4. **Performance issues**: Consider increasing container memory limits
"""


@ComponentRegistry.register(
    "redmine",
    metadata={
        "display_name": "Redmine",
        "description": "Redmine project management with PostgreSQL or MySQL (docker-compose).",
    },
)
class RedmineComponent(ComposeStackComponent):
    directory_name = "redmine"
    settings_attr = "redmine"
    env_template = REDMINE_ENV_TEMPLATE
    compose_template = REDMINE_POSTGRES_COMPOSE_TEMPLATE
    readme_template = REDMINE_README_TEMPLATE

    compose_templates = {
        "postgres": REDMINE_POSTGRES_COMPOSE_TEMPLATE,
        "mysql": REDMINE_MYSQL_COMPOSE_TEMPLATE,
    }

    def gather_parameters(self):
        parameters = super().gather_parameters()
        if self.dry_run:
            return parameters
        database = prompt_choice(
            "Select database type for Redmine:",
            DATABASE_CHOICES,
            parameters.database,
            self.app_settings,
            self.logger,
        )
        return parameters.model_copy(update={"database": database})

    def generate_secrets(self) -> Dict[str, str]:
        if self.dry_run:
            return {"db_password": REDMINE_DEMO_DB_PASSWORD}
        return {"db_password": generate_secret()}

    def build_context(self, parameters, secrets) -> Dict[str, Any]:
        context = super().build_context(parameters, secrets)
        profile = DATABASE_PROFILES[parameters.database]
        for key, value in profile.items():
            context[key] = value.format(**context)
        return context

    def get_compose_template(self, context: Dict[str, Any]) -> str:
        return self.compose_templates[context["database"]]

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        return [
            f"Redmine web interface: http://localhost:{context['port']}",
            "Default login: admin / admin",
            f"Database: {context['db_label']}",
            "Database password saved in .env file",
        ]
