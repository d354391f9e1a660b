"""Verify that the setup is correct before running the collector."""
import os
import sys
import psycopg2
from dotenv import load_dotenv
from collector.domain.errors import ConfigError
from collector.infrastructure.config import load_config, load_database_config

# Load environment variables from .env or env file
load_dotenv('.env') or load_dotenv('env')


def check_environment_variables():
    """Check required environment variables."""
    print("Checking environment variables...")

    required_vars = ["ENVIRONMENT", "GITHUB_TOKEN", "DB_PASSWORD"]

    missing = [var for var in required_vars if not os.getenv(var)]
    if missing:
        print(f"❌ Missing required environment variables: {', '.join(missing)}")
        return False

    print("✅ Required environment variables set")
    print(f"   ENVIRONMENT: {os.getenv('ENVIRONMENT')}")
    return True


def check_configuration():
    """Check that the environment's configuration file loads."""
    print("\nChecking configuration...")

    try:
        config = load_config()
    except ConfigError as e:
        print(f"❌ {e}")
        return False

    db = config.database
    print(f"✅ Configuration loaded for {config.environment}")
    print(f"   Database: {db.user}@{db.host}:{db.port}/{db.database}")
    return True


def check_database_schema():
    """Check PostgreSQL connection and that both tables exist."""
    print("\nChecking database schema...")

    try:
        conn = psycopg2.connect(**load_database_config().connection_params())
        cursor = conn.cursor()

        cursor.execute("""
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public' AND table_name IN ('projects', 'repositories')
        """)
        tables = {row[0] for row in cursor.fetchall()}

        if tables == {"projects", "repositories"}:
            cursor.execute("SELECT COUNT(*) FROM repositories")
            count = cursor.fetchone()[0]
            print("✅ Database schema exists")
            print(f"   Tracked repositories: {count}")
            result = True
        else:
            print("❌ Database schema not found. Run 'python setup_postgres.py' first.")
            result = False

        cursor.close()
        conn.close()
        return result

    except Exception as e:
        print(f"❌ Failed to check schema: {e}")
        return False


def check_github_token():
    """Verify GitHub token format."""
    print("\nChecking GitHub token...")

    token = os.getenv("GITHUB_TOKEN")
    if not token:
        print("❌ GITHUB_TOKEN not set")
        return False

    if token.startswith("ghp_") or token.startswith("github_pat_"):
        print("✅ GitHub token format looks valid")
        return True
    else:
        print("⚠️  Token format may be invalid (expected ghp_* or github_pat_*)")
        return True  # Don't fail, might be old format


def main():
    """Run all verification checks."""
    print("=" * 60)
    print("Commit Count Collector - Setup Verification")
    print("=" * 60)

    checks = [
        ("Environment Variables", check_environment_variables),
        ("Configuration", check_configuration),
        ("Database Schema", check_database_schema),
        ("GitHub Token", check_github_token),
    ]

    results = {}
    for name, check_func in checks:
        try:
            results[name] = check_func()
        except Exception as e:
            print(f"❌ {name} check failed with exception: {e}")
            results[name] = False

    print("\n" + "=" * 60)
    print("Verification Summary")
    print("=" * 60)

    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{status}: {name}")

    if all(results.values()):
        print("\n✅ All checks passed! Ready to run the collector.")
        print("\nNext steps:")
        print("  python collect_stats.py")
        sys.exit(0)
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        print("\nCommon solutions:")
        print("  - Set ENVIRONMENT: export ENVIRONMENT=development")
        print("  - Set GITHUB_TOKEN: export GITHUB_TOKEN=your_token")
        print("  - Create schema: python setup_postgres.py")
        sys.exit(1)


if __name__ == "__main__":
    main()
