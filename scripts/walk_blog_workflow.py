"""Walk a blog post through review, publish and archive against a running server.

Usage: python scripts/walk_blog_workflow.py <post_id> <editor_token> <content_manager_token>
"""
import sys

import httpx

BASE = "http://localhost:8000/api/v1"
client = httpx.Client(timeout=15)

if len(sys.argv) != 4:
    print(__doc__)
    sys.exit(1)

post_id, editor_token, manager_token = sys.argv[1:]
editor = {"Authorization": f"Bearer {editor_token}"}
manager = {"Authorization": f"Bearer {manager_token}"}

steps = [
    ("editor", editor, "review"),
    ("editor", editor, "published"),  # expect 403
    ("content_manager", manager, "published"),
    ("content_manager", manager, "archived"),
    ("content_manager", manager, "draft"),  # expect 409
]

for who, headers, target in steps:
    r = client.patch(f"{BASE}/blog/posts/{post_id}/status", json={"status": target}, headers=headers)
    print(f"{who:16} -> {target:10} {r.status_code} {r.json()}")

r = client.get(f"{BASE}/audit/blog_post/{post_id}", headers=manager)
print(f"\nAudit history: {r.status_code}")
if r.status_code == 200:
    for item in r.json()["items"]:
        print(f"  {item['created_at']} {item['action']} {item['details']}")
