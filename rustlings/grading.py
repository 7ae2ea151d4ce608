"""Grading every exercise at once and writing a JSON report of the results."""

from __future__ import annotations

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path

from rustlings.run import RunError, run

REPORT_PATH = ".github/result/check_result.json"


@dataclass
class ExerciseResult:
    """Whether a single exercise passed."""

    name: str
    result: bool


@dataclass
class ExerciseStatistics:
    """Totals for a grading run."""

    total_exercations: int = 0
    total_succeeds: int = 0
    total_failures: int = 0
    total_time: int = 0


@dataclass
class ExerciseCheckList:
    """The full grading report."""

    exercises: list[ExerciseResult] = field(default_factory=list)
    user_name: str | None = None
    statistics: ExerciseStatistics = field(default_factory=ExerciseStatistics)

    def to_json(self):
        """Serialise to indented JSON."""
        data = {
            "exercises": [asdict(result) for result in self.exercises],
            "user_name": self.user_name,
            "statistics": asdict(self.statistics),
        }
        return json.dumps(data, indent=2, ensure_ascii=False)


def grade(exercises, verbose=False):
    """Run every exercise concurrently and collect the results."""
    exercises = list(exercises)
    total = len(exercises)
    check_list = ExerciseCheckList(statistics=ExerciseStatistics(total_exercations=total))
    lock = threading.Lock()
    started = int(time.time())

    def check(exercise):
        exercise_started = int(time.time())
        try:
            run(exercise, verbose)
        except RunError:
            passed = False
        else:
            passed = True
        with lock:
            stats = check_list.statistics
            if passed:
                stats.total_succeeds += 1
                print(f"{exercise.name}执行成功")
            else:
                stats.total_failures += 1
                print(f"{exercise.name}执行失败")
            print(f"总的题目数: {total}")
            print(f"当前做正确的题目数: {stats.total_succeeds}")
            print(f"当前修改试卷耗时: {int(time.time()) - exercise_started} s")
            check_list.exercises.append(ExerciseResult(name=exercise.name, result=passed))

    with ThreadPoolExecutor() as pool:
        list(pool.map(check, exercises))

    total_time = int(time.time()) - started
    print(
        "===============================试卷批改完成,总耗时: "
        f"{total_time} s; =================================="
    )
    check_list.statistics.total_time = total_time
    return check_list


def write_report(check_list, path=REPORT_PATH):
    """Write the report as JSON to ``path``."""
    Path(path).write_text(check_list.to_json(), encoding="utf-8")