"""State managers for the BranchLift runtime.

Each manager wraps a ``KeyValueStore`` and raises domain exceptions from
``branchlift.runtime.errors``, never HTTP exceptions -- that translation is
the router's (or the CLI's) responsibility.
"""
