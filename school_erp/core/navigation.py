# school_erp/core/navigation.py
"""Navigation entries per role."""
from typing import Dict, List

from ..models.enums import UserRole

ALL_ROLES = [role.value for role in UserRole]

NAVIGATION_ITEMS: List[Dict[str, object]] = [
    {"title": "Dashboard", "href": "/dashboard", "roles": ALL_ROLES,
     "description": "Overview and statistics"},
    {"title": "Schools", "href": "/dashboard/schools", "roles": ["super_admin"],
     "description": "Manage schools"},
    {"title": "Classes", "href": "/dashboard/classes", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Manage classes"},
    {"title": "Teacher Assignments", "href": "/dashboard/teacher-assignments", "roles": ["super_admin", "school_admin"],
     "description": "Assign teachers to classes"},
    {"title": "Students", "href": "/dashboard/students", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Manage students"},
    {"title": "Parent Management", "href": "/dashboard/parents", "roles": ["super_admin", "school_admin"],
     "description": "Manage parents and link to students"},
    {"title": "Exams", "href": "/dashboard/exams", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Create and grade exams"},
    {"title": "Lesson Plans", "href": "/dashboard/lesson-plans", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Upload lesson plans and schemes of work"},
    {"title": "Assignments", "href": "/dashboard/assignments", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Set and grade assignments"},
    {"title": "Attendance", "href": "/dashboard/attendance", "roles": ["super_admin", "school_admin", "teacher"],
     "description": "Mark daily attendance"},
    {"title": "My Grades", "href": "/dashboard/my-grades", "roles": ["student"],
     "description": "View your exam results"},
    {"title": "Children's Grades", "href": "/dashboard/children-grades", "roles": ["parent"],
     "description": "View your children's grades"},
]


def navigation_for_role(role: str) -> List[Dict[str, object]]:
    return [item for item in NAVIGATION_ITEMS if role in item["roles"]]


def can_access_route(route: str, role: str) -> bool:
    item = next((item for item in NAVIGATION_ITEMS if item["href"] == route), None)
    return role in item["roles"] if item else False
