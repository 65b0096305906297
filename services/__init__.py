"""Domain services: profile store, swipe ledger, match reconciler, feed, threads, safety."""
