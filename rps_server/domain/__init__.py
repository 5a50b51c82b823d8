"""Domain layer (pure logic).

- Keep game rules, the commit-reveal protocol and the per-user state machine here.
- Avoid I/O: no HTTP/FastAPI, no cookies, no locks.
- Time is passed in as an argument; randomness comes from `secrets` or an injected factory.
"""
