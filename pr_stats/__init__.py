"""PR review stats: aggregates pull-request review comments from GitHub over HTTP."""
