#!/usr/bin/env python3
"""
Seed script to generate bulk projects, tasks and pomodoros for load testing.

Usage:
    python -m scripts.seed [--projects 50] [--tasks-per-project 20] [--clear]
    python -m scripts.seed --demo

Options:
    --projects N            Number of projects to generate (default: 50)
    --tasks-per-project M   Tasks per project (default: 20)
    --clear                 Clear existing data before seeding
    --demo                  Insert the small demo data set instead
"""

import argparse
import asyncio
import random
import time
from datetime import timedelta
from typing import List, Tuple

from sqlalchemy import delete

from taskin.database import async_session_maker, engine, init_db
from taskin.models import Pomodoro, Project, ProjectStatus, Task, TaskStatus, utcnow
from taskin.seeder import seed_database

COLORS = ["#4F46E5", "#059669", "#D97706", "#DC2626", "#7C3AED", "#0891B2"]


async def clear_data():
    """Clear all existing data."""
    print("Clearing existing data...")
    async with async_session_maker() as session:
        for model in (Pomodoro, Task, Project):
            await session.execute(delete(model))
        await session.commit()
    print("Data cleared.")


def generate_data(
    num_projects: int = 50,
    tasks_per_project: int = 20,
) -> Tuple[List[Project], List[Task], List[Pomodoro]]:
    """
    Generate projects with a realistic mix of states.

    Strategy:
    - Project statuses weighted towards active
    - Task statuses spread across todo / in progress / done
    - Some open tasks get a deadline in the past (overdue)
    - Done and in-progress tasks get 1-6 pomodoros
    """
    now = utcnow()
    projects, tasks, pomodoros = [], [], []

    print(f"Generating {num_projects} projects x {tasks_per_project} tasks...")

    for p in range(num_projects):
        project = Project(
            name=f"Project {p:03d}",
            description=f"Generated project {p}",
            status=random.choices(
                [ProjectStatus.ACTIVE, ProjectStatus.COMPLETED, ProjectStatus.ON_HOLD],
                weights=[6, 3, 1],
            )[0],
            due_date=now + timedelta(days=random.randint(-30, 180)),
            background_color=random.choice(COLORS),
        )
        projects.append(project)

        for t in range(tasks_per_project):
            status = random.choice(list(TaskStatus))
            # 20% of tasks have a deadline, some of them already passed
            deadline = None
            if random.random() < 0.2:
                deadline = now + timedelta(days=random.randint(-10, 60))

            task = Task(
                description=f"Task P{p:03d}-{t:03d}",
                project_id=project.id,
                status=status,
                deadline=deadline,
            )
            tasks.append(task)

            if status != TaskStatus.TODO:
                for _ in range(random.randint(1, 6)):
                    pomodoros.append(
                        Pomodoro(
                            task_id=task.id,
                            start_time=now - timedelta(hours=random.randint(1, 24 * 60)),
                            duration_in_minutes=random.choice([15, 25, 25, 25, 50]),
                        )
                    )

    return projects, tasks, pomodoros


async def insert_batch(rows: list, label: str):
    """Insert rows in batches for performance."""
    async with async_session_maker() as session:
        batch_size = 500
        print(f"Inserting {len(rows)} {label}...")
        for i in range(0, len(rows), batch_size):
            session.add_all(rows[i:i + batch_size])
            await session.flush()
        await session.commit()


async def main():
    parser = argparse.ArgumentParser(description="Seed the Taskin database")
    parser.add_argument("--projects", type=int, default=50, help="Number of projects")
    parser.add_argument("--tasks-per-project", type=int, default=20, help="Tasks per project")
    parser.add_argument("--clear", action="store_true", help="Clear existing data")
    parser.add_argument("--demo", action="store_true", help="Insert the small demo data set")
    args = parser.parse_args()

    print("=" * 60)
    print("Taskin Seed Script")
    print("=" * 60)

    await init_db()

    if args.clear:
        await clear_data()

    if args.demo:
        async with async_session_maker() as session:
            seeded = await seed_database(session)
        print("Demo data inserted." if seeded else "Projects already exist, demo data skipped.")
        await engine.dispose()
        return

    start = time.time()
    projects, tasks, pomodoros = generate_data(args.projects, args.tasks_per_project)

    # Parents first: the foreign keys are enforced
    await insert_batch(projects, "projects")
    await insert_batch(tasks, "tasks")
    await insert_batch(pomodoros, "pomodoros")

    elapsed = time.time() - start
    print(f"\nSeed complete in {elapsed:.2f}s")
    print(f"  Projects:  {len(projects)}")
    print(f"  Tasks:     {len(tasks)}")
    print(f"  Pomodoros: {len(pomodoros)}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
