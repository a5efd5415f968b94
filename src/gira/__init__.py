"""Git branch cleanup driven by Jira issue state.

Features:
- Correlate local branches with Jira issues through a configurable key pattern
- Show each branch's issue status in an interactive picker
- Delete exactly the branches picked, stopping at the first failure
- Plain-text report of branches grouped by issue status
- Protection for the checked-out branch
"""

__version__ = "0.3.0"
