# src/storage/checkpoint_store.py
import json
from pathlib import Path
from typing import Optional

STATE_FILE = "state/checkpoints.json"


class CheckpointStore:
    """
    Persists the last checkpoint per source root in a JSON state file:
        {"sources": {"<root>": "<checkpoint>"}}
    """

    def __init__(self, state_file=STATE_FILE):
        self.state_file = Path(state_file)
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.state_file.exists():
            self.save_state({"sources": {}})

    def load_state(self):
        return json.loads(self.state_file.read_text())

    def save_state(self, state):
        # write-then-rename so a crash never leaves a truncated state file
        tmp = self.state_file.with_suffix(self.state_file.suffix + ".tmp")
        tmp.write_text(json.dumps(state, indent=2))
        tmp.replace(self.state_file)

    def get(self, root: str) -> Optional[str]:
        return self.load_state().get("sources", {}).get(root)

    def put(self, root: str, checkpoint: str):
        state = self.load_state()
        state.setdefault("sources", {})[root] = checkpoint
        self.save_state(state)
