"""Core progress-tracking logic: formatting, heuristics, timers and the poller."""
