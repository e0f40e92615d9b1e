"""Storefront management CLI.

Creates and drops the database schema, creates admin accounts and seeds the
catalogue with sample artworks.

Usage:
    python src/manage.py setup-db                                   # Create all tables
    python src/manage.py drop-db                                    # Drop all tables
    python src/manage.py create-admin --email a@b.com --password …  # Add an admin account
    python src/manage.py seed-products                              # Load the sample catalogue
"""

import argparse
import sys

SAMPLE_PRODUCTS = [
    {
        "title": "Sunset Over Mountains",
        "description": "Oil painting of a sunset over a mountain range, oranges and purples on snow-capped peaks.",
        "price": 1200.0,
        "image_url": "https://images.unsplash.com/photo-1617369120004-4fc70312c5e6",
        "category": "Painting",
        "stock_quantity": 1,
    },
    {
        "title": "Abstract Emotions",
        "description": "Mixed media piece built from layered textures and bold colour fields.",
        "price": 850.0,
        "image_url": "https://images.unsplash.com/photo-1614696369359-a5c7a7cd9d25",
        "category": "Mixed Media",
        "stock_quantity": 1,
    },
    {
        "title": "Midnight Forest",
        "description": "Digital artwork of a moonlit forest, printed on archival paper.",
        "price": 450.0,
        "image_url": "https://images.unsplash.com/photo-1518406616186-6d180412eb13",
        "category": "Digital Art",
        "stock_quantity": 5,
    },
    {
        "title": "Urban Reflections",
        "description": "Photograph of city lights mirrored in rain-soaked streets.",
        "price": 350.0,
        "image_url": "https://images.unsplash.com/photo-1608501078713-8e445a709b39",
        "category": "Photography",
        "stock_quantity": 10,
    },
    {
        "title": "Eternal Embrace",
        "description": "Bronze sculpture of two intertwined figures.",
        "price": 3500.0,
        "image_url": "https://images.unsplash.com/photo-1575224526797-5730d09d781d",
        "category": "Sculpture",
        "stock_quantity": 1,
    },
    {
        "title": "Serenity Waves",
        "description": "Seascape in soft blues, painted with palette knife strokes.",
        "price": 680.0,
        "image_url": "https://images.unsplash.com/photo-1518998053901-5348d3961a04",
        "category": "Painting",
        "stock_quantity": 2,
    },
    {
        "title": "Geometric Balance",
        "description": "Limited edition print of interlocking geometric shapes.",
        "price": 275.0,
        "image_url": "https://images.unsplash.com/photo-1619266465172-02a857c3556d",
        "category": "Prints",
        "stock_quantity": 15,
    },
]


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def create_admin(email, password, username=None):
    from storefront.identity.passwords import hash_password
    from storefront.identity.user import User, check_password_strength

    domain = _domain()
    with domain.domain_context():
        check_password_strength(password)
        repo = domain.repository_for(User)
        if repo.find_by_email(email) is not None:
            print(f"An account for {email} already exists.")
            sys.exit(1)

        admin = User.register(email=email, password_hash=hash_password(password), username=username, is_admin=True)
        repo.add(admin)
        print(f"Admin {admin.email} created ({admin.id}).")


def seed_products():
    from storefront.catalogue.management import AddProduct

    domain = _domain()
    with domain.domain_context():
        for data in SAMPLE_PRODUCTS:
            domain.process(AddProduct(**data), asynchronous=False)
            print(f"  added {data['title']}")
    print(f"Seeded {len(SAMPLE_PRODUCTS)} products.")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--username")

    subparsers.add_parser("seed-products", help="Load the sample catalogue")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        create_admin(args.email, args.password, args.username)
    elif args.command == "seed-products":
        seed_products()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
