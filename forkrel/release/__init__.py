"""Fork release flow.

- semver: version grammar and precedence
- state: repository preconditions and state snapshot
- base: changelog base resolution
- collector: commit retrieval and categorization
- changelog: entry rendering and splicing
- manifest: version bump and lockfile refresh
- committer: release commit, tag and push
- planner: the state machine tying them together
"""

from __future__ import annotations
