"""
Shared embed utilities for the Coffee Golf bot.

Turns leaderboard reports, player stats and tournament data into Discord
embeds. The line formatters are plain functions so the HTTP routes and
tests can use them without building embeds.
"""

import discord
from typing import List, Optional

from coffee_golf_bot.constants import UIConstants
from coffee_golf_bot.data_models.leaderboard import DailyEntry, LeaderboardReport, LeaderboardSection, RangeEntry
from coffee_golf_bot.data_models.scores import PlayerStats, Tournament
from coffee_golf_bot.utils.scoring import ScoringMode


def format_daily_line(entry: DailyEntry) -> str:
    line = f"{entry.rank_label} **{entry.player_name}**: {entry.strokes} strokes"
    if entry.route:
        line += f" {entry.route}"
    return line


def format_range_line(entry: RangeEntry) -> str:
    games = "game" if entry.rounds == 1 else "games"
    return (
        f"{entry.rank_label} **{entry.player_name}**: {entry.average:.2f} avg "
        f"({entry.total_strokes} strokes, {entry.rounds} {games})"
    )


def format_entry_lines(entries: list) -> List[str]:
    lines = []
    for entry in entries:
        if isinstance(entry, DailyEntry):
            lines.append(format_daily_line(entry))
        else:
            lines.append(format_range_line(entry))
    return lines


def chunk_lines(lines: List[str], limit: int = UIConstants.MAX_FIELD_LENGTH) -> List[str]:
    """Pack lines into chunks that fit Discord's embed field limit."""
    chunks = []
    current = ""
    for line in lines:
        line = line[:limit]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def _add_entry_fields(embed: discord.Embed, field_name: str, entries: list):
    chunks = chunk_lines(format_entry_lines(entries)) or ["No scores yet"]
    for index, chunk in enumerate(chunks):
        name = field_name if index == 0 else f"{field_name} (cont.)"
        embed.add_field(name=name, value=chunk, inline=False)


def _date_span(report: LeaderboardReport) -> str:
    if report.start_date == report.end_date:
        return report.start_date
    return f"{report.start_date} to {report.end_date}"


def _field_name(report: LeaderboardReport) -> str:
    return "Scores" if report.scope == 'today' else "Cumulative Scores"


def build_leaderboard_embeds(report: LeaderboardReport) -> List[discord.Embed]:
    """
    Build the embeds for a leaderboard report.

    A single-mode report becomes one embed. A multi-mode report gets a
    header embed followed by one embed per mode that has scores.
    """
    if not report.is_multi_mode:
        section = report.sections[0]
        embed = discord.Embed(
            title=report.title,
            description=f"**{section.title}**\n{_date_span(report)}",
            color=UIConstants.DEFAULT_EMBED_COLOR,
            timestamp=discord.utils.utcnow()
        )
        _add_entry_fields(embed, _field_name(report), section.entries)
        return [embed]

    header = discord.Embed(
        title=report.title,
        description=f"**All Scoring Types**\n{_date_span(report)}",
        color=UIConstants.DEFAULT_EMBED_COLOR,
        timestamp=discord.utils.utcnow()
    )
    embeds = [header]
    for section in report.sections[:UIConstants.MAX_EMBEDS_PER_MESSAGE - 1]:
        embeds.append(build_section_embed(report, section))
    return embeds


def build_section_embed(report: LeaderboardReport, section: LeaderboardSection) -> discord.Embed:
    embed = discord.Embed(
        title=f"{UIConstants.TITLE_EMOJI} {section.title}",
        color=ScoringMode.from_option(section.mode).color,
        timestamp=discord.utils.utcnow()
    )
    _add_entry_fields(embed, _field_name(report), section.entries)
    return embed


def no_scores_message(report: LeaderboardReport) -> str:
    if report.scope == 'today':
        if report.is_multi_mode:
            return f"No scores recorded for today ({report.end_date})!"
        mode = ScoringMode.from_option(report.requested_modes[0])
        return f"No scores recorded for today ({report.end_date}) with {mode.display_name} scoring!"
    return f"No scores recorded between {report.start_date} and {report.end_date}!"


def build_stats_embed(stats: PlayerStats, member: Optional[discord.abc.User] = None) -> discord.Embed:
    """Build a player's all-time Coffee Golf statistics."""
    embed = discord.Embed(
        title=f"{UIConstants.TITLE_EMOJI} Coffee Golf Stats: {stats.name}",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )
    if member:
        embed.set_thumbnail(url=member.display_avatar.url)

    embed.add_field(name="Best Round", value=f"{stats.best_score} strokes", inline=True)
    embed.add_field(name="Average", value=f"{stats.average_score:.2f} strokes", inline=True)
    embed.add_field(name="Rounds Played", value=str(stats.total_games), inline=True)

    last = stats.last_attempt
    if last:
        value = f"{last.strokes} strokes on {last.date}"
        if last.route:
            value += f"\n{last.route}"
        embed.add_field(name="Last Round", value=value, inline=False)
    return embed


def build_tournament_embed(tournament: Tournament, status, standings: List[RangeEntry]) -> discord.Embed:
    """Build a tournament summary with its status and current standings."""
    mode = ScoringMode.from_option(tournament.scoring_type)
    state = "🟢 Active" if tournament.active else "🔴 Ended"
    embed = discord.Embed(
        title=f"{UIConstants.TROPHY_EMOJI} {tournament.name}",
        description=(
            f"{state} | **{mode.display_name}**\n"
            f"{tournament.start_date} to {tournament.end_date}"
        ),
        color=mode.color
    )
    if status is not None:
        embed.add_field(
            name="Progress",
            value=(
                f"Day {min(status.days_elapsed + 1, status.total_days + 1)} of {status.total_days + 1}\n"
                f"{status.days_remaining} day(s) remaining"
            ),
            inline=True
        )
    embed.add_field(name="Participants", value=str(len(tournament.participants)), inline=True)
    _add_entry_fields(embed, "Standings", standings)
    return embed
