"""Initialize the ParkPass database."""
from parkpass.infrastructure.persistence.database import init_db


def main():
    print("Initializing ParkPass database...")
    init_db()
    print("Database initialization complete!")


if __name__ == "__main__":
    main()
