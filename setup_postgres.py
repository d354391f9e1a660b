"""Database initialization script.

Creates the projects and repositories tables. Projects and repositories are
registered out of band; the collector only reads projects and updates
repository statistics.
"""
import sys
import logging
import psycopg2
from dotenv import load_dotenv
from collector.domain.errors import ConfigError
from collector.infrastructure.config import load_database_config

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def create_schema(conn) -> None:
    """Create database schema.

    Schema design considerations:
    - projects holds the tracked coins and the GitHub account owning their code
    - repositories references projects(id); owner/name addresses the remote repository
    - statistics columns default to zero until the first successful run
    - created_at tracks when first registered, updated_at the last refresh
    """
    cursor = conn.cursor()

    try:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS projects (
                id SERIAL PRIMARY KEY,
                name VARCHAR(255) NOT NULL,
                symbol VARCHAR(32) NOT NULL,
                owner VARCHAR(255) NOT NULL,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS repositories (
                id SERIAL PRIMARY KEY,
                project_id INTEGER NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
                name VARCHAR(255) NOT NULL,
                language VARCHAR(255) NOT NULL DEFAULT '',
                pull_requests_count INTEGER NOT NULL DEFAULT 0,
                watchers_count INTEGER NOT NULL DEFAULT 0,
                stargazers_count INTEGER NOT NULL DEFAULT 0,
                issues_count INTEGER NOT NULL DEFAULT 0,
                commits_count_for_the_last_week INTEGER NOT NULL DEFAULT 0,
                commits_count_for_the_last_month INTEGER NOT NULL DEFAULT 0,
                commits_count INTEGER NOT NULL DEFAULT 0,
                contributors_count INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                CONSTRAINT repositories_project_name_unique UNIQUE (project_id, name)
            )
        """)

        # Index for the join from repositories to their project
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_repositories_project_id
            ON repositories(project_id)
        """)

        conn.commit()
        logger.info("Database schema created successfully")

    except Exception as e:
        conn.rollback()
        logger.error(f"Error creating schema: {e}")
        raise
    finally:
        cursor.close()


def main():
    """Initialize the database."""
    try:
        database = load_database_config()
        logger.info(f"Connecting to database {database.database} at {database.host}...")

        conn = psycopg2.connect(**database.connection_params())
        conn.autocommit = False

        create_schema(conn)

        conn.close()
        logger.info("Database initialization completed successfully")

    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
