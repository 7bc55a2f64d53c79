import asyncio
from sdk.pycatalog import CatalogClient


async def delete_once(client, worker, product_id):
    r = await client.delete_product_async(product_id)
    if r.status_code == 200:
        print(f"✅ worker {worker} deleted {product_id}")
    elif r.status_code == 404:
        print(f"❌ worker {worker}: already gone")
    else:
        print(f"⚠️  worker {worker} unexpected response {r.status_code}: {r.text}")
    return r.status_code


async def main():
    c = CatalogClient()

    product_id = c.create_product("Gaming Laptop", 5000, "electronics")["id"]
    print(f"\n🖥️  Created product: {c.get_product(product_id)}")

    # every worker races to delete the same product
    print("\n⚡ Simulating concurrent deletes...")
    statuses = await asyncio.gather(*(delete_once(c, i, product_id) for i in range(5)))

    print(f"\n📊 {statuses.count(200)} succeeded, {statuses.count(404)} got 404")


if __name__ == "__main__":
    asyncio.run(main())
