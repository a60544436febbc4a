import asyncio
import os
import sys
from datetime import date

# Ensure familytree is importable when run from the repo root
sys.path.append(os.getcwd())

from sqlalchemy.future import select
from familytree.database import engine, AsyncSessionLocal, init_models
from familytree.models.user import User
from familytree.models.tree import Tree
from familytree.models.person import Person, Gender, Spouse
from familytree.models.event import Event, EventType
from familytree.models.note import Note

DEMO_EMAIL = "demo@example.com"

async def init_db(seed: bool = True):
    tables = await init_models()
    print(f"Tables ready: {', '.join(tables)}")

    if not seed:
        await engine.dispose()
        return

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).filter(User.email == DEMO_EMAIL))
        user = result.scalars().first()
        if not user:
            user = User(email=DEMO_EMAIL, name="Demo User")
            session.add(user)
            await session.commit()
            await session.refresh(user)
            print(f"Created user {DEMO_EMAIL}")

        result = await session.execute(select(Tree).filter(Tree.owner_id == user.id))
        if result.scalars().first():
            print("Demo tree already exists.")
            await engine.dispose()
            return

        tree = Tree(name="Demo Family", owner_id=user.id, is_public=True, hide_living=True)
        session.add(tree)
        await session.flush()

        grandpa = Person(tree_id=tree.id, first_name="Arthur", last_name="Hale", gender=Gender.MALE,
                         birth_date=date(1920, 3, 2), death_date=date(1999, 8, 14), is_living=False, is_public=True)
        grandma = Person(tree_id=tree.id, first_name="Edith", last_name="Hale", gender=Gender.FEMALE,
                         birth_date=date(1924, 6, 11), death_date=date(2004, 1, 9), is_living=False, is_public=True)
        session.add_all([grandpa, grandma])
        await session.flush()

        father = Person(tree_id=tree.id, first_name="Robert", last_name="Hale", gender=Gender.MALE,
                        birth_date=date(1950, 1, 1), father_id=grandpa.id, mother_id=grandma.id, is_public=True)
        session.add(father)
        await session.flush()

        session.add(Spouse(tree_id=tree.id, person_id=grandpa.id, spouse_id=grandma.id, marriage_date=date(1946, 5, 4)))
        session.add(Event(person_id=grandpa.id, type=EventType.MILITARY, date=date(1942, 1, 1), location="Normandy"))
        session.add(Note(person_id=grandma.id, content="Kept the family bible.", is_private=False))
        await session.commit()
        print(f"Demo tree created (ID: {tree.id}).")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(init_db())
