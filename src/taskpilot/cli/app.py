"""Main CLI application using Typer."""
import asyncio
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..agent import TaskOrchestrator
from ..auth import LoginFlow
from ..chat import ChatSession
from ..tools import ShellRunner
from .providers import get_chat_store, get_credential_store, get_llm, get_logger

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="taskpilot",
    help="Run coding tasks and chats against Claude from your workspace",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

EXIT_WORDS = ("exit", "quit", "q")


def _fail(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")
    raise typer.Exit(code=1)


def _workspace_option() -> Path | None:
    return typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace folder the task operates on (default: current directory)"
    )


@app.command()
def login(
    timeout: float = typer.Option(
        300,
        "--timeout",
        "-t",
        help="Seconds to wait for the browser sign-in"
    )
):
    """Sign in through the browser and store the credentials."""
    async def _login():
        log = get_logger(console)
        store = get_credential_store(debug_callback=log)
        flow = LoginFlow(store, timeout=timeout, debug_callback=log)

        try:
            credentials = await flow.run()
        except Exception as e:
            _fail(e)

        expires = datetime.fromtimestamp(credentials.expires_at / 1000)
        console.print("[green]Successfully signed in![/green]")
        console.print(f"[dim]Token expires at {expires:%Y-%m-%d %H:%M}[/dim]")

    asyncio.run(_login())


@app.command()
def logout():
    """Remove stored credentials from every backend."""
    async def _logout():
        store = get_credential_store(debug_callback=get_logger(console))
        try:
            await store.delete()
        except Exception as e:
            _fail(e)
        console.print("[green]Signed out.[/green]")

    asyncio.run(_logout())


@app.command()
def status():
    """Show sign-in state and credential backends."""
    async def _status():
        store = get_credential_store(debug_callback=get_logger(console))

        table = Table(show_header=False, box=None)
        table.add_column("Item", style="bold cyan", width=15)
        table.add_column("Value")

        credentials = await store.load()
        if credentials is None:
            table.add_row("Signed in", "[yellow]no[/yellow]")
        elif credentials.is_expired():
            table.add_row("Signed in", "[red]token expired[/red]")
        else:
            expires = datetime.fromtimestamp(credentials.expires_at / 1000)
            table.add_row("Signed in", "[green]yes[/green]")
            table.add_row("Expires", f"{expires:%Y-%m-%d %H:%M}")
            table.add_row("Scopes", ", ".join(credentials.scopes))

        backends = [
            f"{b.name}" if b.is_available() else f"[dim]{b.name} (unavailable)[/dim]"
            for b in store.backends
        ]
        table.add_row("Backends", ", ".join(backends))

        console.print(table)

    asyncio.run(_status())


async def _run_orchestrated(workspace: Path | None, start) -> None:
    workspace = workspace or Path.cwd()
    log = get_logger(console)
    store = get_credential_store(debug_callback=log)
    llm = get_llm(store, debug_callback=log)
    orchestrator = TaskOrchestrator(
        llm,
        workspace,
        shell=ShellRunner(str(workspace)),
        debug_callback=log
    )

    try:
        run = await start(orchestrator)
    except Exception as e:
        _fail(e)
    finally:
        await llm.close()

    for report in run.reports:
        marker = "[yellow]-[/yellow]" if report.skipped else "[green]+[/green]"
        console.print(f"{marker} {report.action_type}: {report.target}")
    console.print(f"[green]Done:[/green] {run.summary or 'no summary'}")


@app.command()
def task(
    description: str = typer.Argument(None, help="What the agent should do"),
    workspace: Path | None = _workspace_option(),
):
    """Run a task: plan actions with the model and apply them to the workspace."""
    if not description:
        description = typer.prompt("What would you like me to do?")
    if not description.strip():
        console.print("[dim]Aborted.[/dim]")
        return

    asyncio.run(_run_orchestrated(workspace, lambda o: o.execute_task(description)))


@app.command()
def issue(
    number: int = typer.Argument(..., help="GitHub issue number"),
    workspace: Path | None = _workspace_option(),
):
    """Fetch a GitHub issue with gh and run it as a task."""
    asyncio.run(_run_orchestrated(workspace, lambda o: o.run_issue(number)))


@app.command()
def chat():
    """Interactive streaming chat. Conversations are saved between runs."""
    async def _chat():
        log = get_logger(console)
        llm = get_llm(get_credential_store(debug_callback=log), debug_callback=log)
        chat_store = get_chat_store()

        try:
            await chat_store.connect()
            session = await ChatSession.open(chat_store)

            console.print(f"[bold cyan]{escape(session.current.title)}[/bold cyan]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave, '/new' for a new chat[/dim]\n")

            for message in session.get_messages():
                who = "You" if message.role == "user" else "Claude"
                console.print(f"[bold]{who}:[/bold] {escape(message.content)}")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue

                if user_input.strip().lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                if user_input.strip() == "/new":
                    await session.start_new_conversation()
                    console.print("[dim]Started a new chat.[/dim]\n")
                    continue

                console.print("[bold green]Claude:[/bold green] ", end="")
                await session.stream_reply(
                    llm,
                    user_input,
                    on_chunk=lambda chunk: console.out(chunk, end="", highlight=False),
                )
                console.print("\n")

        except Exception as e:
            _fail(e)
        finally:
            await chat_store.disconnect()
            await llm.close()

    asyncio.run(_chat())


@app.command(name="new-chat")
def new_chat():
    """Archive the current conversation and start an empty one."""
    async def _new_chat():
        chat_store = get_chat_store()
        try:
            await chat_store.connect()
            session = await ChatSession.open(chat_store)
            await session.start_new_conversation()
            console.print("[green]Started a new chat.[/green]")
        except Exception as e:
            _fail(e)
        finally:
            await chat_store.disconnect()

    asyncio.run(_new_chat())


@app.command()
def history():
    """List archived conversations, most recent first."""
    async def _history():
        chat_store = get_chat_store()
        try:
            await chat_store.connect()
            session = await ChatSession.open(chat_store)
        except Exception as e:
            _fail(e)
        finally:
            await chat_store.disconnect()

        conversations = session.get_conversation_history()
        if not conversations:
            console.print("[yellow]No saved conversations[/yellow]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Messages", style="green", width=8)
        table.add_column("Created", style="yellow")

        for conversation in conversations:
            table.add_row(
                conversation.id,
                escape(conversation.title),
                str(len(conversation.messages)),
                f"{conversation.created_at.astimezone():%Y-%m-%d %H:%M}",
            )

        console.print(table)

    asyncio.run(_history())


@app.command(name="open-chat")
def open_chat(
    conversation_id: str = typer.Argument(..., help="Conversation ID from 'taskpilot history'")
):
    """Make an archived conversation current again."""
    async def _open_chat():
        chat_store = get_chat_store()
        try:
            await chat_store.connect()
            session = await ChatSession.open(chat_store)
            found = await session.load_conversation(conversation_id)
        except Exception as e:
            _fail(e)
        finally:
            await chat_store.disconnect()

        if not found:
            console.print(f"[red]Error: No conversation with ID {conversation_id}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]Opened:[/green] {escape(session.current.title)}")

    asyncio.run(_open_chat())


@app.command(name="clear-history")
def clear_history(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    )
):
    """Delete all saved conversations."""
    async def _clear():
        if not yes:
            console.print("[yellow]WARNING: This will delete all saved conversations![/yellow]")
            confirm = typer.confirm("Are you sure you want to continue?")
            if not confirm:
                console.print("[dim]Aborted.[/dim]")
                return

        chat_store = get_chat_store()
        try:
            await chat_store.connect()
            session = await ChatSession.open(chat_store)
            await session.clear_all_history()
            console.print("[green]Chat history cleared.[/green]")
        except Exception as e:
            _fail(e)
        finally:
            await chat_store.disconnect()

    asyncio.run(_clear())


if __name__ == "__main__":
    app()
