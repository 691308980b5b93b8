"""


Controller Channel

A single websocket connection to the CNC controller carries many logical streams. Inbound frames
are JSON objects tagged with a 'type'; outbound frames are commands tagged with 'cmd' and 'action'.

- schema: runtime checks for untrusted wire data. Each MessageKind pairs a discriminant with a
  record check, the stream that carries it, and the stream's delivery discipline.
- streams: multicast subjects. Latest-value streams replay the last value to new subscribers,
  event streams deliver each value once, the info stream replays a bounded history.
- router: parses a frame, finds the kind that accepts it and emits it on that kind's stream.
  Reply envelopes are unwrapped and dispatched on the payload's own type. Anything else is dropped.
- commands: validated command records and their JSON encoding. Sending while disconnected is a no-op.
- services: per-feature views over the router's streams, composed with send() into a handle.
  The mock handle replays canned values and sends nothing.
- conduit / connector: the transport. A conduit is one open connection; a connector opens conduits.
- connection lifecycle: connects, builds a fresh router and handle for each connection, and
  reconnects after a fixed delay when the connection closes, forever.
- subscription: keeps a consumer bound to a stream of whatever handle is current, tearing down
  the old subscription before binding to a new handle.


## Threading

Everything runs on one asyncio event loop. Delivery to observers is synchronous within the
handler that received the frame, so values of one kind reach observers in arrival order.
"""
