# SPDX-FileCopyrightText: Copyright (c) 2025, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License

# Shared with the workload that writes the log file
LOG_PATH = "/logs"
LOG_FILE = "process-log.txt"
SCRATCH_VOLUME = "scratch"

VERIFY_IMAGE = "busybox"
PIPELINE_API_VERSION = "tekton.dev/v1"
# Lower case kind -> kind of the pipeline resources
PIPELINE_KINDS = {
    "task": "Task",
    "taskrun": "TaskRun",
    "pipeline": "Pipeline",
    "pipelinerun": "PipelineRun",
}

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_TIMEOUT = 600.0

HW_TASK_NAME = "helloworld"
HW_TASK_RUN_NAME = "helloworld-run"
HW_VALIDATION_POD_NAME = "helloworld-validation-busybox"
HW_PIPELINE_NAME = "helloworld-pipeline"
HW_PIPELINE_RUN_NAME = "helloworld-pipelinerun"
HW_PIPELINE_TASK_NAMES = ("helloworld-task-1", "helloworld-task-2")
HW_CONTAINER_NAME = "helloworld-busybox"
HW_TASK_OUTPUT = "do you want to build a snowman"

DEFAULT_LABELS = {"app.kubernetes.io/managed-by": "runprobe"}
