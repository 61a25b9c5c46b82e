#!/usr/bin/env python3
"""
Database management utility for the RideCompare country pricing table.

Usage:
    python manage_db.py init      - Initialize database with default countries
    python manage_db.py show      - Show all country configs
    python manage_db.py update    - Change a country's price multiplier
    python manage_db.py reset     - Reset to default countries
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.database import DatabaseManager


def init_database():
    """Initialize database with default country configs."""
    print("Initializing database...")
    db = DatabaseManager()
    added = db.init_default_countries()
    print(f"Database initialized ({added} countries added)")
    show_countries()


def show_countries():
    """Display all country configs."""
    db = DatabaseManager()
    countries = db.get_all_countries()

    print("\n" + "="*64)
    print("COUNTRY PRICING TABLE")
    print("="*64)
    print(f"{'Code':<6} {'Name':<16} {'Currency':<10} {'Multiplier':<12} {'Services'}")
    print("-"*64)

    for code, country in countries.items():
        currency = f"{country['currency']} {country['currency_symbol']}"
        print(
            f"{code:<6} {country['name']:<16} {currency:<10} "
            f"{country['price_multiplier']:<12.2f} {', '.join(country['services'])}"
        )

    print("-"*64)
    print(f"Total countries: {len(countries)}")
    print("="*64)


def update_multiplier():
    """Interactive price multiplier update."""
    print("\nUPDATE PRICE MULTIPLIER")
    print("-"*30)

    db = DatabaseManager()
    code = input("Enter country code: ").strip().upper()

    current = db.get_country(code)
    if current is None:
        print(f"Unknown country code: {code}")
        return
    print(f"Current multiplier: {current['price_multiplier']}")

    try:
        multiplier = float(input("Enter new multiplier: "))
        db.update_price_multiplier(code, multiplier)
    except ValueError as e:
        print(f"Invalid multiplier: {e}")
        return

    print(f"✓ Updated {code} multiplier to {multiplier}")
    print("Restart the API to pick up the change.")


def reset_database():
    """Reset database to default countries."""
    confirm = input("Are you sure you want to reset all countries to defaults? (yes/no): ")

    if confirm.lower() == 'yes':
        db = DatabaseManager()
        db.reset_countries()
        print("Database reset to defaults!")
        show_countries()
    else:
        print("Reset cancelled.")


def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        return

    command = sys.argv[1].lower()

    commands = {
        'init': init_database,
        'show': show_countries,
        'update': update_multiplier,
        'reset': reset_database,
    }

    if command in commands:
        commands[command]()
    else:
        print(f"Unknown command: {command}")
        print(__doc__)


if __name__ == "__main__":
    main()
