"""
Demo data for a fresh database.
"""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from taskin.logging_config import get_logger
from taskin.models import Pomodoro, Project, ProjectStatus, Task, TaskStatus, utcnow
from taskin.persistence import TaskinDbContext, UnitOfWork

logger = get_logger(__name__)

DEMO_PROJECTS = [
    {
        "name": "Website redesign",
        "description": "New landing page and brand refresh",
        "status": ProjectStatus.ACTIVE,
        "due_in_days": 30,
        "background_color": "#4F46E5",
        "tasks": [
            ("Collect requirements", TaskStatus.DONE, 3),
            ("Wireframes", TaskStatus.IN_PROGRESS, 2),
            ("Visual design", TaskStatus.TODO, 0),
        ],
    },
    {
        "name": "Mobile app",
        "description": "First release of the companion app",
        "status": ProjectStatus.ACTIVE,
        "due_in_days": 90,
        "background_color": "#059669",
        "tasks": [
            ("Set up CI", TaskStatus.DONE, 1),
            ("Login screen", TaskStatus.TODO, 0),
        ],
    },
    {
        "name": "Quarterly report",
        "description": "Q3 numbers for the board",
        "status": ProjectStatus.COMPLETED,
        "due_in_days": None,
        "background_color": "#D97706",
        "tasks": [
            ("Gather figures", TaskStatus.DONE, 4),
            ("Write summary", TaskStatus.DONE, 2),
        ],
    },
    {
        "name": "Office move",
        "description": None,
        "status": ProjectStatus.ON_HOLD,
        "due_in_days": None,
        "background_color": None,
        "tasks": [
            ("Compare offers", TaskStatus.TODO, 0),
        ],
    },
]


async def seed_database(session: AsyncSession) -> bool:
    """
    Insert the demo projects, tasks and pomodoros.

    Returns False without touching anything when projects already exist.
    """
    db = TaskinDbContext(session)
    uow = UnitOfWork(session)

    now = utcnow()
    projects: list[Project] = []
    tasks: list[Task] = []
    pomodoros: list[Pomodoro] = []
    for demo in DEMO_PROJECTS:
        due = demo["due_in_days"]
        project = Project(
            name=demo["name"],
            description=demo["description"],
            status=demo["status"],
            due_date=now + timedelta(days=due) if due is not None else None,
            background_color=demo["background_color"],
        )
        projects.append(project)

        for description, status, sessions in demo["tasks"]:
            task = Task(
                description=description,
                project_id=project.id,
                status=status,
                deadline=now + timedelta(days=14) if status != TaskStatus.DONE else None,
            )
            tasks.append(task)
            pomodoros.extend(
                Pomodoro(task_id=task.id, start_time=now - timedelta(days=i + 1), duration_in_minutes=25)
                for i in range(sessions)
            )

    # Parents are written before children; there are no ORM relationships to order them
    async with uow.transaction() as transaction:
        if await db.projects.count() > 0:
            logger.info("Database already has projects, skipping seed")
            return False
        for rows, entity_set in ((projects, db.projects), (tasks, db.tasks), (pomodoros, db.pomodoros)):
            for row in rows:
                entity_set.add(row)
            await uow.save_changes()
        await uow.commit_transaction(transaction)

    logger.info(f"Seeded {len(projects)} projects, {len(tasks)} tasks, {len(pomodoros)} pomodoros")
    return True
