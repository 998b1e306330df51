# src/highrate/sink.py

import logging

# ─── CONFIG ──────────────────────────────────────────────────────────────────────
PIPE_PATH = '/tmp/wscontrol'   # read by gwsocket --pipein=/tmp/wscontrol

log = logging.getLogger(__name__)


class SinkError(OSError):
    """The pipe could not be opened or written."""


class PipeWriter:
    """
    Writes one record per open/write/close cycle. The reader on the other
    end of the FIFO relies on that cycle as the message boundary, so the
    handle is never kept open across records.
    """

    def __init__(self, path: str = PIPE_PATH):
        self.path = path
        self.writes = 0

    def write(self, record: str):
        # blocks until a reader has the FIFO open
        try:
            with open(self.path, 'wb') as pipe:
                pipe.write(record.encode('utf-8', 'surrogateescape'))
        except OSError as e:
            log.error("cannot open pipe file %s for writing: %s", self.path, e)
            raise SinkError(e.errno, f"cannot write to {self.path}") from e
        self.writes += 1
