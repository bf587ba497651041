"""Database seeding for the groupware service.

Creates the default roles and the standard approval templates.
"""

from typing import Optional

from sqlalchemy.orm import Session

from groupware.db.models import Role, ApprovalTemplate
from groupware.core.rbac.roles import DEFAULT_ROLES


DEFAULT_APPROVAL_TEMPLATES: list[dict] = [
    {
        "name": "Leave request",
        "type": "leave",
        "description": "Annual, sick and family leave",
        "steps": [
            {"order": 1, "role_code": "team_lead", "department_code": None},
            {"order": 2, "role_code": "dept_head", "department_code": None},
        ],
    },
    {
        "name": "Purchase request",
        "type": "purchase",
        "description": "Equipment and supplies purchases",
        "steps": [
            {"order": 1, "role_code": "team_lead", "department_code": None},
            {"order": 2, "role_code": "dept_head", "department_code": None},
            {"order": 3, "role_code": "system_admin", "department_code": "management"},
        ],
    },
    {
        "name": "Business trip",
        "type": "travel",
        "description": "Domestic and international business travel",
        "steps": [
            {"order": 1, "role_code": "team_lead", "department_code": None},
            {"order": 2, "role_code": "system_admin", "department_code": "management"},
        ],
    },
    {
        "name": "Expense claim",
        "type": "expense",
        "description": "Work-related expense reimbursement",
        "steps": [
            {"order": 1, "role_code": "team_lead", "department_code": None},
            {"order": 2, "role_code": "dept_head", "department_code": None},
        ],
    },
]


def seed_default_roles(db: Session) -> dict[str, Role]:
    """
    Create the default roles.
    
    Roles are idempotent - if they already exist, returns existing roles.
    
    Returns:
        Dict mapping role key to Role object
    """
    created_roles = {}
    
    for role_key, role_config in DEFAULT_ROLES.items():
        existing = get_role_by_name(db, role_config["name"])
        
        if existing:
            created_roles[role_key] = existing
            continue
        
        role = Role(
            name=role_config["name"],
            description=role_config["description"],
            permissions=role_config["permissions"],
            is_system=True,
        )
        db.add(role)
        created_roles[role_key] = role
    
    db.flush()
    return created_roles


def seed_approval_templates(db: Session) -> list[ApprovalTemplate]:
    """Create the standard approval templates that do not exist yet (matched by type)."""
    templates = []
    
    for config in DEFAULT_APPROVAL_TEMPLATES:
        existing = db.query(ApprovalTemplate).filter(
            ApprovalTemplate.type == config["type"]
        ).first()
        
        if existing:
            templates.append(existing)
            continue
        
        template = ApprovalTemplate(is_active=True, **config)
        db.add(template)
        templates.append(template)
    
    db.flush()
    return templates


def get_role_by_name(db: Session, name: str) -> Optional[Role]:
    """Get a role by name."""
    return db.query(Role).filter(Role.name == name).first()


# CLI script for seeding
if __name__ == "__main__":
    import sys
    from groupware.db.session import SessionLocal
    
    db = SessionLocal()
    try:
        roles = seed_default_roles(db)
        print(f"Seeded {len(roles)} default roles:")
        for role in roles.values():
            perm_count = len(role.permissions) if role.permissions else 0
            perm_display = "all (*:*)" if "*:*" in role.permissions else f"{perm_count} permissions"
            print(f"  - {role.name}: {perm_display}")
        
        templates = seed_approval_templates(db)
        print(f"\nSeeded {len(templates)} approval templates:")
        for template in templates:
            print(f"  - {template.name} ({template.type}, {len(template.steps)} steps)")
        
        db.commit()
        print("\nSeeding complete!")
        
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()
