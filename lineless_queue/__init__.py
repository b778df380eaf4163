"""Single-counter token queue (hospital OP desk style).

- `engine.QueueEngine` issues sequential tokens, advances the "now serving"
  pointer and derives people ahead, wait time, progress and the queue board
- `status` classifies a tracked token as missed / now / soon / relax
- `ticker` advances an engine periodically through a cancellable handle
- `desk`, `patient` and `gui` expose one engine over MQTT

See `python -m lineless_queue.app -h`.
"""
