"""Quiz room domain services: registry, state machine, membership, scoring
and timers.

Socket handlers and HTTP routes import from here; nothing in this package
emits on a socket directly except the timer worker, which hands its outcome
to the broadcast layer.
"""
