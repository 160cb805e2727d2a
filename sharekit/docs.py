"""`sharekit` invariants and boundaries.

This module exists to make repository-wide refactors and boundary tests explicit.

Generic invariants:

1) `sharekit` must not import `multi_image.*`.
2) `sharekit` provides the handoff primitives (argument guards, the property
   registry, deferred handoff generation, lookups) and nothing about how a
   build description is laid out.
3) A registry is an explicit object owned by whoever runs a configuration
   phase. There is no module-level registry.
4) Handoff files are rendered only by `HandoffGenerator.finalize`, which the
   caller invokes once after the configuration phase.

Project code decides image ordering, where handoff files live, and how a
parent discovers its children's files.
"""
