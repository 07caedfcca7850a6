"""Demo simulation services: state store, follow-up timer, client simulator."""
