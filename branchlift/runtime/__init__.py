"""Client-side session and workspace state for BranchLift."""
