"""Markdown renderers for the agent's chat replies."""

from typing import Any, Dict, List, Optional

from .types import VideoIdeaResult


def format_number(num: Any) -> str:
    n = float(num or 0)
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(int(n))


def format_duration(seconds: Any) -> str:
    total = int(seconds or 0)
    mins, secs = divmod(total, 60)
    return f"{mins}:{secs:02d}" if mins > 0 else f"{secs}s"


def format_youtube_results(result: Dict[str, Any], query: str) -> str:
    videos: List[Dict[str, Any]] = (result or {}).get("videos") or []
    if not videos:
        return f'I couldn\'t find any videos for "{query}". Try a different search term!'

    videos = videos[:5]
    lines = [f'🎥 **Found {len(videos)} trending videos for "{query}":**', ""]
    for index, video in enumerate(videos, start=1):
        lines.append(f"**{index}. {video.get('caption', '')}**")
        lines.append(
            f"👤 {video.get('author', '')} • 👁️ {format_number(video.get('views'))} views"
            f" • ⏱️ {format_duration(video.get('duration'))}"
        )
        lines.append(f"🔗 {video.get('url', '')}")
        lines.append("")

    lines.append("💡 **What would you like to do next?**")
    lines.append("• Ask me to transcribe any of these videos")
    lines.append("• Generate a script based on a video")
    lines.append("• Search for different content")
    return "\n".join(lines)


def format_transcription_result(result: Dict[str, Any], video_title: Optional[str] = None) -> str:
    transcript = (result or {}).get("transcript")
    if not transcript:
        return "I couldn't transcribe that video. It might be private or unavailable."

    title = f' for "{video_title}"' if video_title else ""
    return (
        f"📝 **Transcription complete{title}!**\n\n"
        f"**Transcript:**\n{transcript}\n\n"
        "💡 **Next steps:**\n"
        "• Ask me to generate a viral script from this transcript\n"
        "• Search for more videos to analyze\n"
        "• Get content optimization tips"
    )


def format_script_result(result: Dict[str, Any]) -> str:
    script = (result or {}).get("script")
    if not script:
        return "I couldn't generate a script. Please try again with different parameters."

    out = f"🎬 **Your viral script is ready!**\n\n{script}\n\n"
    hooks = result.get("hooks") or []
    if hooks:
        out += "🎯 **Alternative hooks:**\n"
        for index, hook in enumerate(hooks, start=1):
            out += f"{index}. {hook}\n"
        out += "\n"

    out += (
        "💡 **Want to improve this script?**\n"
        "• Ask me to adjust the tone or style\n"
        "• Generate variations for different platforms\n"
        "• Get tips for better engagement"
    )
    return out


def format_video_idea_response(ideas: VideoIdeaResult) -> str:
    out = f"🧠 {ideas['summary']}\n\n"
    for script in ideas["scripts"]:
        out += f"## 🎥 **{script['title']}**\n\n"
        out += f"**Hook:** \"{script['hook']}\"\n\n"
        out += f"**Script:**\n{script['script']}\n\n"
        out += f"**CTA:** {script['cta']}\n\n"
        out += f"**Why this works:** {script['reasoning']}\n\n"
        out += f"**Hashtags:** {' '.join(script['hashtags'])}\n\n"
        out += "---\n\n"

    out += "✨ **Want to explore more?**\n"
    for suggestion in ideas["suggestions"]:
        out += f"• {suggestion}\n"
    return out
