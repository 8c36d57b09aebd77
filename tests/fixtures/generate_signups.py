"""
Generate randomized signup sets for capacity tests.
"""

import random

from faker import Faker

from models.projects import Signup, SignupStatus
from models.schedule import SlotDescriptor

STATUSES = [s.value for s in SignupStatus]


def generate_signups(
    project_id: str,
    slots: list[SlotDescriptor],
    count: int,
    seed: int = 0,
    stale_ratio: float = 0.1,
) -> list[Signup]:
    """
    Random signups spread over ``slots`` with mixed statuses.

    Roughly ``stale_ratio`` of them reference a schedule id that is not in
    ``slots`` (as after a schedule edit). Half are anonymous.
    """
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)

    signups = []
    for _ in range(count):
        if not slots or rng.random() < stale_ratio:
            schedule_id = f"stale-{fake.word()}"
        else:
            schedule_id = rng.choice(slots).schedule_id

        identity = (
            {"user_id": fake.uuid4()} if rng.random() < 0.5 else {"anonymous_id": fake.uuid4()}
        )
        signups.append(
            Signup(
                project_id=project_id,
                schedule_id=schedule_id,
                status=rng.choice(STATUSES),
                created_at=fake.date_time_this_year(),
                **identity,
            )
        )
    return signups
