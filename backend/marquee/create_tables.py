from marquee.db import engine, Base
from marquee import models  # noqa: F401  registers every table on Base

def main():
    """Create all database tables"""
    Base.metadata.create_all(bind=engine)
    print("All tables created successfully.")

if __name__ == "__main__":
    main()
