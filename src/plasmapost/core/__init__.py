"""Domain model: units, tools, operations, jobs and the toolpath event stream."""
