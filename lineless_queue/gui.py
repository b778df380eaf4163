from __future__ import annotations

# Public queue board (Tkinter).
#
# Shows "now serving" and the upcoming tokens from the desk's broadcast
# snapshots, plus the latest patient notice.
#
# MQTT callbacks arrive on paho's network thread while Tkinter must be updated
# from the UI thread, so messages go through a Queue drained by `root.after`.

import argparse
import queue
import time
import tkinter as tk
from tkinter import ttk
from typing import Any, cast

from .mqtt_client import MqttClient
from .mqtt_topics import queue_updates


class QueueBoardApp:
    def __init__(self, *, mqtt_host: str, mqtt_port: int, namespace: str, refresh_ms: int = 250) -> None:
        self.mqtt_host = mqtt_host
        self.mqtt_port = mqtt_port
        self.namespace = namespace
        self.refresh_ms = refresh_ms

        self.root = tk.Tk()
        self.root.title("LineLess Queue Board")
        self.root.geometry("420x420")

        self.info_var = tk.StringVar(value="Connecting...")
        ttk.Label(self.root, textvariable=self.info_var).pack(fill=cast(Any, tk.X), padx=10, pady=(10, 5))

        self.serving_var = tk.StringVar(value="-")
        ttk.Label(self.root, textvariable=self.serving_var, font=("TkDefaultFont", 28, "bold")).pack(pady=5)

        cols = ("identifier", "label")
        self.tree = ttk.Treeview(self.root, columns=cols, show="headings", height=10)
        self.tree.heading("identifier", text="Token")
        self.tree.heading("label", text="Status")
        self.tree.column("identifier", width=140, anchor=cast(Any, tk.W))
        self.tree.column("label", width=180, anchor=cast(Any, tk.W))
        self.tree.tag_configure("current", background="#d9f2d9")
        self.tree.pack(fill=cast(Any, tk.BOTH), expand=True, padx=10, pady=10)

        self.notice_var = tk.StringVar(value="")
        ttk.Label(self.root, textvariable=self.notice_var, wraplength=380).pack(
            fill=cast(Any, tk.X), padx=10, pady=(0, 10)
        )

        self._inbox: "queue.Queue[dict[str, Any]]" = queue.Queue(maxsize=20)
        self._mqtt = MqttClient(client_id=f"board-{int(time.time())}", host=mqtt_host, port=mqtt_port)
        self._last_snapshot_ts: float | None = None

        self.root.protocol("WM_DELETE_WINDOW", self.close)

    def start(self) -> None:
        # Keep the window up with an error line if the broker is unreachable.
        try:
            self._mqtt.start()
            self._mqtt.subscribe(queue_updates(self.namespace))
            self._mqtt.add_handler(self._on_mqtt_message)
            self.info_var.set(f"Connected to {self.mqtt_host}:{self.mqtt_port} | waiting for updates...")
        except OSError as e:
            self.info_var.set(f"MQTT connection failed: {e}")

        self.root.after(cast(Any, self.refresh_ms), self._drain_inbox)
        self.root.mainloop()

    def close(self) -> None:
        try:
            self._mqtt.stop()
        finally:
            self.root.destroy()

    # -------------------- MQTT thread callback --------------------

    def _on_mqtt_message(self, topic: str, msg: dict[str, Any]) -> None:
        if msg.get("type") not in ("queue_snapshot", "status_notice"):
            return
        try:
            self._inbox.put_nowait(msg)
        except queue.Full:
            # UI is behind; the next snapshot supersedes this one.
            pass

    # -------------------- UI thread polling --------------------

    def _drain_inbox(self) -> None:
        while True:
            try:
                msg = self._inbox.get_nowait()
            except queue.Empty:
                break
            if msg["type"] == "queue_snapshot":
                self._last_snapshot_ts = time.time()
                self._render_snapshot(msg)
            else:
                notice = msg.get("notice") or {}
                self.notice_var.set(f"{msg.get('token')}: {notice.get('text', '')}")

        if self._last_snapshot_ts is not None:
            age = max(0.0, time.time() - self._last_snapshot_ts)
            self.info_var.set(f"namespace={self.namespace} | last update {age:0.1f}s ago")

        self.root.after(cast(Any, self.refresh_ms), self._drain_inbox)

    def _render_snapshot(self, snapshot: dict[str, Any]) -> None:
        self.serving_var.set(str(snapshot.get("now_serving", "-")))

        for item in self.tree.get_children():
            self.tree.delete(item)

        for entry in snapshot.get("entries") or []:
            tags = ("current",) if entry.get("role") == "current" else ()
            self.tree.insert(
                "",
                cast(Any, tk.END),
                values=(entry.get("identifier", "?"), entry.get("label", "?")),
                tags=tags,
            )


def main() -> None:
    parser = argparse.ArgumentParser(description="Queue board (Tkinter + MQTT)")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default="lineless/v0")
    parser.add_argument("--refresh-ms", type=int, default=250)
    args = parser.parse_args()

    app = QueueBoardApp(
        mqtt_host=args.mqtt_host,
        mqtt_port=args.mqtt_port,
        namespace=args.namespace,
        refresh_ms=args.refresh_ms,
    )
    app.start()


if __name__ == "__main__":
    main()
