import asyncio
import json

from dgraphy import Dgraph, Mutation, Operation

SCHEMA = "name: string @index(exact) .\npopulation: int ."


async def run():
    async with Dgraph(dsn="http://localhost:8080") as dgraph:
        await dgraph.alter(Operation(schema=SCHEMA))

        async with dgraph.txn() as txn:
            city = {"uid": "_:city", "name": "Kabul", "population": 1780000}
            assigned = await txn.mutate(
                Mutation(set_json=json.dumps(city).encode())
            )
            await txn.commit()
        print(assigned.uids)

        async with dgraph.read_only_txn(best_effort=True) as txn:
            response = await txn.query_with_vars(
                """
                query city($name: string) {
                    city(func: eq(name, $name)) { uid name population }
                }
                """,
                {"$name": "Kabul"},
            )
        print(response.data())


asyncio.run(run())
