"""Query execution engine.

Runs a batch of catalog queries against one document and returns the
results keyed by query name. The execution mode is a cost decision only;
it never changes the values produced.

Architecture (bottom-up):
- schemas: ExecutionMode, ParallelOptions, UnitTask/UnitOutcome payloads
- mode_selector: serialized-size measurement + pluggable mode strategy
- sequential: in-caller, one-at-a-time execution (fail-fast)
- unit_executors: isolation backends (in-process, one process per unit)
- dispatcher: fan-out of one unit per query with an all-or-nothing join
- query_runner: top-level entry that selects a mode and dispatches
"""
