"""Account commands."""

from __future__ import annotations

import logging
from typing import List

from pasctl.api import accounts
from pasctl.commands.base import CommandArgumentParser, confirm, dispatch_subcommand
from pasctl.errors import ParseError
from pasctl.output.formatter import OutputFormat, print_info, print_success
from pasctl.shell.context import ExecutionContext, require_session

logger = logging.getLogger(__name__)


class AccountsCommand:
    """List, show and delete privileged accounts."""

    name = "accounts"
    description = "Manage privileged accounts"
    usage = """accounts <subcommand> [options]

Subcommands:
  list                List accounts
  get <id>            Get account details
  delete <id>         Delete an account

Options for 'list':
  --safe=NAME         Filter by safe name
  --search=TERM       Search term
  --limit=N           Maximum results (default: 25)
  --offset=N          Skip first N results

Options for 'delete':
  --force             Do not ask for confirmation

Examples:
  accounts list --safe=Production --limit=10
  accounts get 12_34
  accounts delete 12_34
"""
    subcommands = ["list", "get", "delete"]

    def execute(self, ctx: ExecutionContext, args: List[str]) -> None:
        """Route to the list, get or delete subcommand.

        Raises:
            NotConnectedError: If there is no active session
            ParseError: If the subcommand or its options are invalid
        """
        require_session(ctx)

        dispatch_subcommand(self.name, self.usage, {
            "list": lambda rest: self._list(ctx, rest),
            "get": lambda rest: self._get(ctx, rest),
            "delete": lambda rest: self._delete(ctx, rest),
        }, args)

    def _list(self, ctx: ExecutionContext, args: List[str]) -> None:
        parser = CommandArgumentParser("accounts list")
        parser.add_flag('safe', default="", help="Filter by safe name")
        parser.add_flag('search', default="", help="Search term")
        parser.add_flag('limit', type=int, default=25, help="Maximum results")
        parser.add_flag('offset', type=int, default=0, help="Skip first N results")
        opts = parser.parse(args)
        if opts is None:
            return

        options = accounts.ListOptions(
            safe_name=opts.safe,
            search=opts.search,
            limit=opts.limit,
            offset=opts.offset,
        )
        result = accounts.list_accounts(ctx.scope, ctx.session, options)

        if not result.value:
            print_info("No accounts found")
            return

        if ctx.formatter.get_format() != OutputFormat.TABLE:
            ctx.formatter.format(result)
            return

        table = ctx.formatter.table("ID", "USERNAME", "ADDRESS", "PLATFORM", "SAFE")
        for account in result.value:
            table.add_row(account.id, account.user_name, account.address,
                          account.platform_id, account.safe_name)
        table.render()
        print(f"\nShowing {len(result.value)} of {result.count} accounts")

    def _get(self, ctx: ExecutionContext, args: List[str]) -> None:
        if not args:
            raise ParseError("account ID required")

        account = accounts.get_account(ctx.scope, ctx.session, args[0])
        ctx.formatter.format(account)

    def _delete(self, ctx: ExecutionContext, args: List[str]) -> None:
        parser = CommandArgumentParser("accounts delete")
        parser.add_argument('account_id', help="Account ID")
        parser.add_flag('force', action='store_true', help="Do not ask for confirmation")
        opts = parser.parse(args)
        if opts is None:
            return

        if not opts.force and not confirm(f"Delete account {opts.account_id}?"):
            print_info("Cancelled")
            return

        accounts.delete_account(ctx.scope, ctx.session, opts.account_id)
        print_success(f"Account {opts.account_id} deleted")
