"""
Thrust Log
==========
Append-only CSV record of the pitch sweep.

One headerless row per completed pitch: the per-trial thrust samples
followed by their mean.
"""

import csv
import sys
import numpy as np
from pathlib import Path
from typing import List, Sequence, Union


def summarize_trials(samples: Sequence[float]) -> List[float]:
    """Per-trial samples with their arithmetic mean appended."""
    if not samples:
        raise ValueError("Cannot summarize an empty trial group")
    values = [float(sample) for sample in samples]
    values.append(sum(values) / len(values))
    return values


def format_value(value: float) -> str:
    """Plain decimal text, never scientific notation."""
    return np.format_float_positional(float(value), trim='0')


def append_to_csv(file_path: Union[str, Path], values: Sequence[float]):
    """Append one record to `file_path`. Raises on I/O failure."""
    with open(file_path, 'a', newline='') as f:
        writer = csv.writer(f)
        writer.writerow([format_value(v) for v in values])
        f.flush()


class ThrustLog:
    """
    CSV sink for completed pitch rows.

    Write failures are reported on stderr and counted; the row is dropped
    and the sweep carries on.
    """

    def __init__(self, path: Union[str, Path] = "output.csv"):
        self.path = Path(path)
        self.rows_written = 0
        self.failures = 0

    def append(self, row: Sequence[float]) -> bool:
        try:
            append_to_csv(self.path, row)
        except (OSError, csv.Error) as e:
            self.failures += 1
            print(f"Error writing CSV: {e}", file=sys.stderr)
            return False

        self.rows_written += 1
        print("Successful writing to CSV")
        return True
