"""
Permissions and Roles Configuration
This config defines the permission matrix for every module and the school roles
(teacher, student, parent) that hold them. Route dependencies check against
ROLE_PERMISSIONS; the demo seed script checks seeded users against the same
matrix.
"""

USER_ROLES = ("teacher", "student", "parent")

# Define modules and their actions
MODULES = {
    "profiles": {
        "resource": "profiles",
        "actions": ["read", "update"],
        "description": "User profile management"
    },
    "classrooms": {
        "resource": "classrooms",
        "actions": ["create", "read", "update", "join"],
        "description": "Classroom management"
    },
    "messages": {
        "resource": "messages",
        "actions": ["create", "read"],
        "description": "Classroom announcements and private messages"
    },
    "events": {
        "resource": "events",
        "actions": ["create", "read", "update", "delete"],
        "description": "School calendar events"
    },
    "tasks": {
        "resource": "tasks",
        "actions": ["create", "read", "update", "delete"],
        "description": "Personal to-do items"
    },
    "grades": {
        "resource": "grades",
        "actions": ["create", "read"],
        "description": "Assignment grades"
    },
    "attendance": {
        "resource": "attendance",
        "actions": ["create", "read"],
        "description": "Attendance records"
    },
    "fees": {
        "resource": "fees",
        "actions": ["create", "read", "pay"],
        "description": "Fee tracking"
    },
}

# Actions granted per role, keyed by module; "*" grants every action of the module
ROLE_GRANTS = {
    "teacher": {
        "profiles": ["*"],
        "classrooms": ["*"],
        "messages": ["*"],
        "events": ["*"],
        "tasks": ["*"],
        "grades": ["*"],
        "attendance": ["*"],
        "fees": ["create", "read"],
    },
    "student": {
        "profiles": ["*"],
        "classrooms": ["read", "join"],
        "messages": ["create", "read"],
        "events": ["read"],
        "tasks": ["*"],
        "grades": ["read"],
        "attendance": ["read"],
        "fees": ["read"],
    },
    "parent": {
        "profiles": ["*"],
        "classrooms": ["read", "join"],
        "messages": ["create", "read"],
        "events": ["read"],
        "tasks": ["*"],
        "grades": ["read"],
        "attendance": ["read"],
        "fees": ["read", "pay"],
    },
}

ROLE_DESCRIPTIONS = {
    "teacher": "Creates classrooms, events and student records",
    "student": "Joins classrooms and follows own records",
    "parent": "Follows their children's classrooms, records and fees",
}

# Additional descriptions for non-CRUD actions
MODULE_SPECIFIC_PERMISSIONS = {
    "classrooms": {
        "join": "Join a classroom with its code"
    },
    "fees": {
        "pay": "Mark a fee as paid"
    },
}


def _expand_grants(grants: dict) -> list:
    names = []
    for module_name, actions in grants.items():
        module_actions = MODULES[module_name]["actions"]
        selected = module_actions if "*" in actions else [a for a in actions if a in module_actions]
        names.extend(f"{MODULES[module_name]['resource']}:{a}" for a in selected)
    return sorted(names)


# Generate permission matrix
def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the school roles holding them
    Format: {
        "permissions": [
            {"name": "classrooms:create", "resource": "classrooms", "action": "create", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "teacher", "description": "...", "permissions": ["classrooms:create", ...]},
            ...
        ]
    }
    """
    permissions = []
    for module_name, module_config in MODULES.items():
        resource = module_config["resource"]
        for action in module_config["actions"]:
            description = f"{action.capitalize()} {resource}"
            if module_name in MODULE_SPECIFIC_PERMISSIONS and action in MODULE_SPECIFIC_PERMISSIONS[module_name]:
                description = MODULE_SPECIFIC_PERMISSIONS[module_name][action]
            permissions.append({
                "name": f"{resource}:{action}",
                "resource": resource,
                "action": action,
                "description": description
            })

    roles = [
        {
            "name": role,
            "description": ROLE_DESCRIPTIONS[role],
            "permissions": _expand_grants(ROLE_GRANTS[role])
        }
        for role in USER_ROLES
    ]

    return {
        "permissions": permissions,
        "roles": roles
    }


# Export the matrix for use in seed scripts and route dependencies
PERMISSION_MATRIX = get_permission_matrix()

ROLE_PERMISSIONS = {role["name"]: frozenset(role["permissions"]) for role in PERMISSION_MATRIX["roles"]}


def role_has_permission(role: str, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())
