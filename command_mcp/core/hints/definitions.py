"""
Tool definitions and metadata for Command MCP tools.

This module contains the tool definitions with their parameters, actions,
and examples. It's separated from the validator logic for better
maintainability.
"""
from typing import Dict
from .data_structures import ParameterInfo, ActionInfo, ToolInfo

def get_tool_definitions() -> Dict[str, ToolInfo]:
    """Initialize tool definitions with parameters and hints."""
    tools = {}

    tools["execute_command"] = ToolInfo(
        name="execute_command",
        description="Execute a host command",
        actions={
            "": ActionInfo(
                name="",
                description="Execute a command by name. Runs in the background when async execution is enabled.",
                parameters=[
                    ParameterInfo(
                        name="command",
                        type="string",
                        required=True,
                        description="Command to execute",
                        examples=["host.echo", "workspace.listFolder"]
                    ),
                    ParameterInfo(
                        name="arguments",
                        type="array",
                        item_type="string",
                        required=False,
                        description="Command arguments",
                        examples=["['hello']", "['src']"],
                        default_value=[]
                    )
                ],
                examples=[
                    "execute_command(command='host.echo', arguments=['hello'])",
                    "execute_command(command='host.time')"
                ],
                next_steps=[
                    "With async execution, poll background_tasks(action='status', task_id=...) for the outcome"
                ]
            )
        },
        common_workflows=[
            "Discover names with list_commands, then run one with execute_command"
        ]
    )

    tools["list_commands"] = ToolInfo(
        name="list_commands",
        description="List available host commands",
        actions={
            "": ActionInfo(
                name="",
                description="List allowed host commands, sorted, first 20 only",
                parameters=[],
                examples=["list_commands()"]
            )
        }
    )

    tools["get_workspace_info"] = ToolInfo(
        name="get_workspace_info",
        description="Get workspace information",
        actions={
            "": ActionInfo(
                name="",
                description="Workspace name, folders and active file",
                parameters=[],
                examples=["get_workspace_info()"]
            )
        }
    )

    task_id_param = ParameterInfo(
        name="task_id",
        type="string",
        required=True,
        description="Task id returned by execute_command",
        examples=["bg_task_1_1718000000000"]
    )

    tools["background_tasks"] = ToolInfo(
        name="background_tasks",
        description="Inspect and manage background command tasks",
        actions={
            "status": ActionInfo(
                name="status",
                description="Status of one task, or aggregate statistics without task_id",
                parameters=[ParameterInfo(
                    name="task_id",
                    type="string",
                    required=False,
                    description="Task id returned by execute_command",
                    examples=["bg_task_1_1718000000000"]
                )],
                examples=["background_tasks(action='status', task_id='bg_task_1_1718000000000')"]
            ),
            "list": ActionInfo(
                name="list",
                description="List all tasks",
                parameters=[],
                examples=["background_tasks(action='list')"]
            ),
            "stats": ActionInfo(
                name="stats",
                description="Task counts per status",
                parameters=[],
                examples=["background_tasks(action='stats')"]
            ),
            "cancel": ActionInfo(
                name="cancel",
                description="Cancel a pending or running task (best-effort, never interrupts a running command)",
                parameters=[task_id_param],
                examples=["background_tasks(action='cancel', task_id='bg_task_1_1718000000000')"]
            ),
            "clear_completed": ActionInfo(
                name="clear_completed",
                description="Remove completed, failed and cancelled tasks",
                parameters=[],
                examples=["background_tasks(action='clear_completed')"]
            ),
            "clear_all": ActionInfo(
                name="clear_all",
                description="Remove every task",
                parameters=[],
                examples=["background_tasks(action='clear_all')"]
            ),
            "health": ActionInfo(
                name="health",
                description="Health report including stuck tasks",
                parameters=[],
                examples=["background_tasks(action='health')"]
            ),
            "config": ActionInfo(
                name="config",
                description="Show the execution settings in effect",
                parameters=[],
                examples=["background_tasks(action='config')"]
            ),
            "reload_config": ActionInfo(
                name="reload_config",
                description="Re-read the configuration source and apply it",
                parameters=[],
                examples=["background_tasks(action='reload_config')"]
            )
        },
        common_workflows=[
            "Submit with execute_command, then poll background_tasks(action='status', task_id=...)",
            "Periodically run background_tasks(action='clear_completed')"
        ]
    )

    return tools
