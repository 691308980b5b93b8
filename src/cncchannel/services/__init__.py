"""
Per-feature stream sets and the service handle that combines them.

A handle is the only thing consuming code sees of the channel: a send() capability plus one
read-only stream per message kind. Live handles are built per connection from a router; the
mock handle replays canned values and never sends anything.
"""
