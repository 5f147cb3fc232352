#!/usr/bin/env python3
"""
Smoke test for a running Task Manager API
Run this after starting the server (python start_server.py) on a seeded database
"""

import os
import sys
import uuid

import requests

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin12345")

failures = 0


def check(description, response, expected_status):
    global failures
    if response.status_code == expected_status:
        print(f"✅ {description} - Status: {response.status_code}")
    else:
        failures += 1
        print(f"❌ {description} - Expected: {expected_status}, Got: {response.status_code}")
        print(f"   Response: {response.text[:200]}")
    return response


def login(email, password):
    response = requests.post(f"{API_BASE_URL}/auth/login", json={"email": email, "password": password})
    check(f"Login {email}", response, 200)
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def register(prefix):
    email = f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"
    payload = {"email": email, "password": "Password123!", "first_name": prefix.title(), "last_name": "Smoke"}
    user = check(f"Register {email}", requests.post(f"{API_BASE_URL}/auth/register", json=payload), 201).json()
    return user, login(email, "Password123!")


def run():
    print("🧪 Smoke testing Task Manager API")
    print("=" * 50)

    check("Health", requests.get(f"{API_BASE_URL}/health"), 200)

    owner, owner_headers = register("owner")
    other, other_headers = register("other")
    admin_headers = login(ADMIN_EMAIL, ADMIN_PASSWORD)

    project = check(
        "Create project",
        requests.post(f"{API_BASE_URL}/projects/", json={"name": "Smoke Project"}, headers=owner_headers),
        201,
    ).json()
    project_url = f"{API_BASE_URL}/projects/{project['id']}"

    check("Owner reads project", requests.get(project_url, headers=owner_headers), 200)
    check("Outsider cannot read project", requests.get(project_url, headers=other_headers), 403)
    check("Last member cannot leave", requests.delete(f"{project_url}/members/{owner['id']}", headers=owner_headers), 409)
    check("Add member", requests.post(f"{project_url}/members/{other['id']}", headers=owner_headers), 200)

    task = check(
        "Create task",
        requests.post(
            f"{API_BASE_URL}/tasks/",
            json={"title": "Smoke task", "project_id": project["id"], "priority": "HIGH", "due_date": "2030-01-31"},
            headers=owner_headers,
        ),
        201,
    ).json()
    task_url = f"{API_BASE_URL}/tasks/{task['id']}"

    check("Member reads task", requests.get(task_url, headers=other_headers), 200)
    check("Member without task permission cannot update", requests.patch(task_url, json={"status": "DONE"}, headers=other_headers), 403)
    check("Creator assigns member", requests.patch(task_url, json={"assignee_id": other["id"]}, headers=owner_headers), 200)
    check("Assignee updates status", requests.patch(task_url, json={"status": "IN_PROGRESS"}, headers=other_headers), 200)
    check("Cannot view others' assigned tasks", requests.get(f"{API_BASE_URL}/tasks/assignee/{owner['id']}", headers=other_headers), 403)
    check("List tasks", requests.get(f"{API_BASE_URL}/tasks/", params={"priority": "HIGH"}, headers=owner_headers), 200)

    check("Non-admin cannot delete project", requests.delete(project_url, headers=owner_headers), 403)
    check("Admin deletes project", requests.delete(project_url, headers=admin_headers), 204)

    print("\n" + "=" * 50)
    print("Smoke test completed!" if not failures else f"{failures} check(s) failed")
    return failures


if __name__ == "__main__":
    sys.exit(1 if run() else 0)
