"""Entity registry: one EntitySchema per Singularity REST resource.

Standalone data module. Field tables mirror the request bodies the
Singularity v2 API accepts; ``filters`` are the query parameters forwarded
on list calls (anything else is dropped).
"""

from singularity_mcp.schema import (
    EntitySchema,
    FieldType,
    ParentScope,
    any_value,
    array_of,
    boolean,
    number,
    one_of,
    string,
)

HABIT_COLORS = (
    "red",
    "pink",
    "purple",
    "deepPurple",
    "indigo",
    "lightBlue",
    "cyan",
    "teal",
    "green",
    "lightGreen",
    "lime",
    "yellow",
    "amber",
    "orange",
    "deepOrange",
    "brown",
    "grey",
    "blueGrey",
)

_INCLUDE_REMOVED = boolean("includeRemoved")
_MAX_COUNT = number("maxCount", description="Maximum number of items in response")


PROJECT = EntitySchema(
    name="Project",
    plural="Projects",
    title="Project",
    title_plural="Projects",
    noun="project",
    noun_plural="projects",
    path="/v2/project",
    collection_uri="projects",
    item_uri="project/{id}",
    collection_resource="projects",
    item_resource="project",
    payload_key="project",
    fields=(
        string("title", required=True),
        string("note"),
        string("start"),
        string("end"),
        string("deleteDate"),
        boolean("showInBasket"),
        string("emoji"),
        string("color"),
        string("externalId"),
        string("reviewValidationDate"),
        number("reviewValidationInterval"),
        string("parent"),
        number("parentOrder"),
        boolean("isNotebook"),
        array_of("tags", FieldType.STRING),
        string("journalDate"),
    ),
    filters=(_INCLUDE_REMOVED, boolean("includeArchived"), _MAX_COUNT),
)

TASK_GROUP = EntitySchema(
    name="TaskGroup",
    plural="TaskGroups",
    title="Task Group",
    title_plural="Task Groups",
    noun="task group",
    noun_plural="task groups",
    path="/v2/task-group",
    collection_uri="task-groups",
    item_uri="task-group/{id}",
    collection_resource="taskGroups",
    item_resource="taskGroup",
    payload_key="taskGroup",
    fields=(
        string("title", required=True),
        string("externalId"),
        string("parent", required=True),
        number("parentOrder"),
        boolean("fake"),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("parent")),
)

TASK = EntitySchema(
    name="Task",
    plural="Tasks",
    title="Task",
    title_plural="Tasks",
    noun="task",
    noun_plural="tasks",
    path="/v2/task",
    collection_uri="tasks",
    item_uri="task/{id}",
    collection_resource="tasks",
    item_resource="task",
    payload_key="task",
    fields=(
        string("title", required=True),
        string("note"),
        number("priority"),
        any_value("recurrence"),
        string("journalDate"),
        number("complete"),
        string("completeLast"),
        number("state"),
        number("checked"),
        boolean("showInBasket"),
        string("projectId"),
        string("start"),
        array_of("startNotifiesReaded", FieldType.NUMBER),
        array_of("notifies", FieldType.NUMBER),
        boolean("useTime"),
        boolean("deferred"),
        string("deadline"),
        boolean("deadlineNotifyReaded"),
        string("parent"),
        string("group"),
        number("scheduleOrder"),
        number("parentOrder"),
        number("timeLength"),
        boolean("isNote"),
        array_of("tags", FieldType.STRING),
        string("externalId"),
    ),
    filters=(
        _INCLUDE_REMOVED,
        boolean("includeArchived"),
        _MAX_COUNT,
        string("projectId"),
        string("parent"),
        boolean("includeAllRecurrenceInstances"),
        string("startDateFrom"),
        string("startDateTo"),
    ),
    parent_scopes=(
        ParentScope(
            name="projectTasks",
            title="Project Tasks",
            uri="project/{projectId}/tasks",
            variable="projectId",
            description="List of tasks for a specific project",
        ),
    ),
)

NOTE = EntitySchema(
    name="Note",
    plural="Notes",
    title="Note",
    title_plural="Notes",
    noun="note",
    noun_plural="notes",
    path="/v2/note",
    collection_uri="notes",
    item_uri="note/{id}",
    collection_resource="notes",
    item_resource="note",
    payload_key="note",
    fields=(
        string("containerId", required=True),
        string("content", required=True),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("containerId")),
    update_required=frozenset({"containerId", "content"}),
    parent_scopes=(
        ParentScope(
            name="containerNotes",
            title="Container Notes",
            uri="container/{containerId}/notes",
            variable="containerId",
            description="List of notes for a specific container",
        ),
    ),
)

KANBAN_STATUS = EntitySchema(
    name="KanbanStatus",
    plural="KanbanStatuses",
    title="Kanban Status",
    title_plural="Kanban Statuses",
    noun="kanban status",
    noun_plural="kanban statuses",
    path="/v2/kanban-status",
    collection_uri="kanban-statuses",
    item_uri="kanban-status/{id}",
    collection_resource="kanban-statuses",
    item_resource="kanban-status",
    payload_key="kanbanStatus",
    fields=(
        string("name", required=True),
        string("projectId", required=True),
        number("kanbanOrder"),
        number("numberOfColumns"),
        string("externalId"),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("projectId")),
)

KANBAN_TASK_STATUS = EntitySchema(
    name="KanbanTaskStatus",
    plural="KanbanTaskStatuses",
    title="Kanban Task Status",
    title_plural="Kanban Task Statuses",
    noun="kanban task status",
    noun_plural="kanban task statuses",
    path="/v2/kanban-task-status",
    collection_uri="kanban-task-statuses",
    item_uri="kanban-task-status/{id}",
    collection_resource="kanban-task-statuses",
    item_resource="kanban-task-status",
    payload_key="kanbanTaskStatus",
    fields=(
        string("taskId", required=True),
        string("statusId", required=True),
        number("kanbanOrder"),
        string("externalId"),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("taskId"), string("statusId")),
)

HABIT = EntitySchema(
    name="Habit",
    plural="Habits",
    title="Habit",
    title_plural="Habits",
    noun="habit",
    noun_plural="habits",
    path="/v2/habit",
    collection_uri="habits",
    item_uri="habit/{id}",
    collection_resource="habits",
    item_resource="habit",
    payload_key="habit",
    fields=(
        string("title", required=True),
        string("description"),
        one_of("color", HABIT_COLORS),
        number("order"),
        number("status"),
        string("externalId"),
    ),
    filters=(_MAX_COUNT,),
    collection_description="List of all habits",
)

HABIT_PROGRESS = EntitySchema(
    name="HabitProgress",
    plural="HabitProgress",
    title="Habit Progress",
    title_plural="Habit Progress Records",
    noun="habit progress record",
    noun_plural="habit progress records",
    path="/v2/habit-progress",
    collection_uri="habit-progress",
    item_uri="habit-progress/{id}",
    collection_resource="habitProgressRecords",
    item_resource="habitProgress",
    payload_key="progress",
    fields=(
        string("habit", required=True),
        string("date", required=True),
        number("progress", required=True),
        string("externalId"),
    ),
    filters=(_MAX_COUNT, string("habit"), string("startDate"), string("endDate")),
    collection_description="List of all habit progress records",
)

CHECKLIST_ITEM = EntitySchema(
    name="ChecklistItem",
    plural="ChecklistItems",
    title="Checklist Item",
    title_plural="Checklist Items",
    noun="checklist item",
    noun_plural="checklist items",
    path="/v2/checklist-item",
    collection_uri="checklist-items",
    item_uri="checklist-item/{id}",
    collection_resource="checklistItems",
    item_resource="checklistItem",
    payload_key="item",
    fields=(
        string("parent", required=True),
        string("title", required=True),
        boolean("done"),
        string("crypted"),
        number("parentOrder"),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("parent")),
    collection_description="List of all checklist items",
)

TAG = EntitySchema(
    name="Tag",
    plural="Tags",
    title="Tag",
    title_plural="Tags",
    noun="tag",
    noun_plural="tags",
    path="/v2/tag",
    collection_uri="tags",
    item_uri="tag/{id}",
    collection_resource="tags",
    item_resource="tag",
    payload_key="tag",
    fields=(
        string("title", required=True),
        string("externalId", required=True),
        number("hotkey", required=True),
        string("parent", required=True),
        number("parentOrder", required=True),
        string("color", required=True),
    ),
    filters=(_INCLUDE_REMOVED, _MAX_COUNT, string("parent")),
    collection_description="List of all tags",
)

_TIME_STAT_FILTERS = (
    string("dateFrom", description="Filter by start date (from)"),
    string("dateTo", description="Filter by start date (to)"),
    string("relatedTaskId", description="Filter by related task ID"),
)

TIME_STAT = EntitySchema(
    name="TimeStat",
    plural="TimeStats",
    title="Time Stat",
    title_plural="Time Statistics",
    noun="time statistics entry",
    noun_plural="time statistics entries",
    path="/v2/time-stat",
    collection_uri="time-stats",
    item_uri="time-stat/{id}",
    collection_resource="time-stats",
    item_resource="time-stat",
    payload_key="timeStat",
    fields=(
        string("start", required=True, description="Start date (ISO 8601 format)"),
        number("secondsPassed", required=True, description="Duration in seconds"),
        string("relatedTaskId", description="Related task ID"),
        number("source", description="Source type (0 = pomodoro, 1 = stopwatch)"),
    ),
    filters=_TIME_STAT_FILTERS + (_MAX_COUNT,),
    bulk_delete_filters=_TIME_STAT_FILTERS,
    collection_description="List of all time statistics (work sessions)",
    list_description="Lists time statistics entries with optional filters",
    create_description="Creates a new time statistics entry (work session)",
)


ENTITY_SCHEMAS: tuple[EntitySchema, ...] = (
    PROJECT,
    TASK_GROUP,
    TASK,
    NOTE,
    KANBAN_STATUS,
    KANBAN_TASK_STATUS,
    HABIT,
    HABIT_PROGRESS,
    CHECKLIST_ITEM,
    TAG,
    TIME_STAT,
)


def schema_by_name(name):
    """Look up an EntitySchema by its name (e.g. ``"TaskGroup"``)."""
    for schema in ENTITY_SCHEMAS:
        if schema.name == name:
            return schema
    raise KeyError(name)
