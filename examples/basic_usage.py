#!/usr/bin/env python3
"""
Basic gitmirror usage example.

Runs both operations against an in-memory provider and record store, then
shows how the same calls look against GitHub and Supabase.
Run with: python examples/basic_usage.py
"""

import logging

from gitmirror import GitMirrorClient, InMemoryRepositoryStore, PushStrategy, configure_logging
from gitmirror.testing import FakeGitHub, create_repository_record

configure_logging(level=logging.INFO)

print("=== gitmirror Basic Usage Example ===\n")

# 1. Offline setup: acme/app has main at abc123, acme/mirror is empty
github = FakeGitHub()
github.add_repository("acme", "app", branches={"main": "abc123"})
github.add_repository("acme", "mirror")

store = InMemoryRepositoryStore([
    create_repository_record(id="source-id", nickname="App"),
    create_repository_record(id="target-id", url="https://github.com/acme/mirror.git"),
])

with GitMirrorClient(github, store) as mirror:
    # 2. Read the source head
    print("1. Fetching latest commit...")
    result = mirror.fetch_latest_commit("source-id")
    print(f"   success={result.success} sha={result.sha}\n")

    # 3. Mirror it onto the target (creates main on the target first)
    print("2. Force pushing onto the mirror...")
    result = mirror.push("source-id", "target-id", PushStrategy.FORCE)
    print(f"   success={result.success} sha={result.sha}")
    print(f"   calls: {[call.method for call in github.get_calls()]}\n")

    # 4. The request/response contract used by the dashboard
    print("3. Handling a raw request payload...")
    status, body = mirror.handle({"type": "push", "sourceRepoId": "source-id"})
    print(f"   status={status} body={body}\n")

    record = store.get("target-id")
    print(f"Target record: status={record.status.value} last_commit={record.last_commit}")

# Against real services:
#
#   export GITHUB_ACCESS_TOKEN=...
#   export SUPABASE_URL=https://<project>.supabase.co
#   export SUPABASE_SERVICE_ROLE_KEY=...
#
#   with GitMirrorClient.from_env() as mirror:
#       mirror.push("<source uuid>", "<target uuid>", PushStrategy.MERGE)
