"""
Seed script to populate the resource, verb and permission catalogs.

Run this script after database initialization to create:
- The conference platform's resource tree (grouping nodes and pages)
- The default verbs
- One permission per (page resource, verb)

Usage:
    uv run python -m scripts.seed_catalog
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db, init_db
from app.features.catalog.models import Permission, Resource, ResourceType, Verb
from app.utils import get_logger


log = get_logger(__name__)


DEFAULT_VERBS = [
    # (action, display name)
    ("create", "Create"),
    ("read", "Read"),
    ("update", "Update"),
    ("delete", "Delete"),
]


# (code, key, name, type, parent code, sequence, icon, path)
# Grouping nodes have no permissions; they only organize the tree.
DEFAULT_RESOURCES = [
    # Conference menus
    ("conference_menu", "ConferenceMenu", "Conference", ResourceType.GENERAL, None, 1, "calendar", None),
    ("conference", "ConferenceManagement", "Conferences", ResourceType.GENERAL, "conference_menu", 1, "presentation", "/conferences"),
    ("event_schedule", "EventScheduleManagement", "Event Schedule", ResourceType.GENERAL, "conference_menu", 2, "clock", "/event-schedule"),

    # Workshop menus
    ("workshop_menu", "WorkshopMenu", "Workshop", ResourceType.GENERAL, None, 2, "tools", None),
    ("workshop", "WorkshopManagement", "Workshops", ResourceType.GENERAL, "workshop_menu", 1, "tools", "/workshops"),
    ("workshop_registration", "WorkshopRegistrationManagement", "Workshop Registrations", ResourceType.GENERAL, "workshop_menu", 2, "clipboard", "/workshop-registrations"),
    ("instructor", "InstructorManagement", "Instructors", ResourceType.GENERAL, "workshop_menu", 3, "user-check", "/instructors"),
    ("location", "LocationManagement", "Locations", ResourceType.GENERAL, "workshop_menu", 4, "map-pin", "/locations"),

    # Content menus
    ("content_menu", "ContentMenu", "Content", ResourceType.GENERAL, None, 3, "folder", None),
    ("faq", "FaqManagement", "FAQs", ResourceType.GENERAL, "content_menu", 1, "help-circle", "/faqs"),
    ("testimony", "TestimonyManagement", "Testimonies", ResourceType.GENERAL, "content_menu", 2, "message-square", "/testimonies"),
    ("feedback", "FeedbackManagement", "Feedback", ResourceType.GENERAL, "content_menu", 3, "inbox", "/feedback"),
    ("file", "FileManagement", "Files", ResourceType.GENERAL, "content_menu", 4, "file", "/files"),

    # System menus
    ("system_menu", "SystemMenu", "System", ResourceType.SYSTEM, None, 1, "settings", None),
    ("user", "UserManagement", "Users", ResourceType.SYSTEM, "system_menu", 1, "users", "/system/users"),
    ("role", "RoleManagement", "Roles", ResourceType.SYSTEM, "system_menu", 2, "shield", "/system/roles"),
    ("permission", "PermissionManagement", "Permissions", ResourceType.SYSTEM, "system_menu", 3, "key", "/system/permissions"),
    ("resource", "ResourceManagement", "Resources", ResourceType.SYSTEM, "system_menu", 4, "layers", "/system/resources"),

    # Communication menus
    ("comms_menu", "CommsMenu", "Communication", ResourceType.SYSTEM, None, 2, "bell", None),
    ("notification", "NotificationManagement", "Notifications", ResourceType.SYSTEM, "comms_menu", 1, "bell", "/comms/notifications"),
    ("notification_history", "NotificationHistoryManagement", "Notification History", ResourceType.SYSTEM, "comms_menu", 2, "archive", "/comms/notification-history"),
]


async def seed_verbs(db: AsyncSession) -> dict[str, Verb]:
    """
    Create default verbs.

    Returns:
        Dictionary mapping verb actions to Verb objects
    """
    log.info("Creating default verbs...")
    verbs_map = {}

    for action, display_name in DEFAULT_VERBS:
        result = await db.execute(select(Verb).where(Verb.action == action))
        existing = result.scalars().first()

        if existing:
            log.debug(f"Verb '{action}' already exists, skipping")
            verbs_map[action] = existing
            continue

        verb = Verb(action=action, display_name=display_name)
        db.add(verb)
        verbs_map[action] = verb
        log.info(f"Created verb: {action}")

    await db.commit()
    for verb in verbs_map.values():
        await db.refresh(verb)

    return verbs_map


async def seed_resources(db: AsyncSession) -> dict[str, Resource]:
    """
    Create the default resource tree.

    Parents are listed before their children, so each parent is already
    flushed when its children are created.
    """
    log.info("Creating default resources...")
    resources_map = {}

    for code, key, name, resource_type, parent_code, sequence, icon, path in DEFAULT_RESOURCES:
        result = await db.execute(select(Resource).where(Resource.code == code))
        existing = result.scalars().first()

        if existing:
            log.debug(f"Resource '{code}' already exists, skipping")
            resources_map[code] = existing
            continue

        parent = resources_map.get(parent_code) if parent_code else None
        resource = Resource(
            code=code,
            key=key,
            name=name,
            type=resource_type,
            pid=parent.id if parent else None,
            sequence=sequence,
            icon=icon,
            path=path,
        )
        db.add(resource)
        await db.flush()
        resources_map[code] = resource
        log.info(f"Created resource: {code}")

    await db.commit()
    log.info(f"Created {len(resources_map)} resources")
    return resources_map


async def seed_permissions(db: AsyncSession, resources_map: dict[str, Resource], verbs_map: dict[str, Verb]):
    """Create one permission per (page resource, verb); grouping nodes get none."""
    log.info("Creating default permissions...")
    created = 0

    for code, _key, name, _type, _parent, _seq, _icon, path in DEFAULT_RESOURCES:
        if path is None:
            continue
        resource = resources_map[code]
        for action, display_name in DEFAULT_VERBS:
            permission_code = f"{code}:{action}"
            result = await db.execute(select(Permission).where(Permission.code == permission_code))
            if result.scalars().first():
                log.debug(f"Permission '{permission_code}' already exists, skipping")
                continue

            db.add(Permission(
                code=permission_code,
                resource_id=resource.id,
                verb_id=verbs_map[action].id,
                display_name=f"{display_name} {name}",
            ))
            created += 1

    await db.commit()
    log.info(f"Created {created} permissions")


async def main():
    """Main function to seed the catalogs."""
    log.info("Starting catalog seeding...")

    # Initialize database tables first
    log.info("Initializing database tables...")
    await init_db()

    # Get database session
    async for db in get_db():
        try:
            verbs_map = await seed_verbs(db)
            resources_map = await seed_resources(db)
            await seed_permissions(db, resources_map, verbs_map)

            log.info("Catalog seeding completed successfully!")

        except Exception as e:
            log.error(f"Error seeding catalogs: {e}", exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
