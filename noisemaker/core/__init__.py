"""Core — records, the activity log, classification and dispatch."""
