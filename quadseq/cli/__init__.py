"""Terminal front end for Quad Sequence."""
