#!/usr/bin/env python
from sdk.pycatalog import CatalogClient, CatalogAPIError


def main():
    c = CatalogClient()

    print("Endpoints:", c.index())

    # -----------------------------
    # Create products
    # -----------------------------
    print("\nCreating products...")
    laptop = c.create_product("Laptop", 1500, "electronics")
    mouse = c.create_product("Mouse", 25.5, "electronics")
    mug = c.create_product("Mug", "8", "kitchen")
    print(laptop, mouse, mug, sep="\n")

    # -----------------------------
    # Queries
    # -----------------------------
    print("\nElectronics, cheapest first...")
    print(c.list_products(category="electronics", sort="price"))

    print("\nAt least 20, names and prices only...")
    print(c.list_products(min_price=20, fields=["name", "price"]))

    print("\nRejected query (sort=name)...")
    try:
        c.list_products(sort="name")
    except CatalogAPIError as e:
        print(e)

    # -----------------------------
    # Read, update, delete
    # -----------------------------
    print("\nFetching the mug...")
    print(c.get_product(mug["id"]))

    print("\nMoving the mug to 'home'...")
    print(c.update_product(mug["id"], category="home"))

    print("\nDeleting everything we created...")
    for created in (laptop, mouse, mug):
        print(c.delete_product(created["id"]))

    print("\nDeleting the mug again...")
    try:
        c.delete_product(mug["id"])
    except CatalogAPIError as e:
        print(e)


if __name__ == "__main__":
    main()
