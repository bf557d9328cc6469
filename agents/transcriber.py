"""Audio transcription for YouTube videos.

Downloads the audio track with yt-dlp and sends it to Groq's hosted Whisper.
The downloaded file is always removed, whether transcription worked or not.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

import yt_dlp
from groq import Groq

from .errors import DownloadFailed, InvalidVideoURL, MissingAPIKey, TranscriptionFailed

logger = logging.getLogger(__name__)

YOUTUBE_URL_RE = re.compile(
    r"^(https?://)?(www\.)?(youtube\.com/watch\?v=|youtu\.be/)([a-zA-Z0-9_-]{11})"
)
VIDEO_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/watch\?.*v=([a-zA-Z0-9_-]{11})"),
)

WHISPER_MODEL = "whisper-large-v3"
DOWNLOAD_TIMEOUT = 60
DOWNLOAD_ERROR = (
    "Failed to download video audio. "
    "The video might be private, age-restricted, or unavailable."
)


def extract_video_id(url: str) -> Optional[str]:
    """Extract the 11-character video id from watch, short and embed URLs."""
    for pattern in VIDEO_ID_PATTERNS:
        m = pattern.search(url or "")
        if m:
            return m.group(1)
    return None


def validate_video_url(url: str) -> str:
    """Return the video id of a supported YouTube URL or raise InvalidVideoURL."""
    if not url:
        raise InvalidVideoURL("Video URL is required")
    if not YOUTUBE_URL_RE.match(url):
        raise InvalidVideoURL("Invalid YouTube URL")
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidVideoURL("Could not extract video ID")
    return video_id


class Transcriber:
    def __init__(self, api_key: Optional[str] = None, audio_dir: Optional[str] = None):
        self.api_key = api_key or os.environ.get("GROQ_API_KEY")
        self.audio_dir = audio_dir or os.environ.get(
            "OPENSCRIPT_AUDIO_DIR", os.path.join(os.getcwd(), "temp", "audio")
        )

    def transcribe(self, video_url: str) -> Dict[str, Any]:
        """Transcribe a YouTube video; returns {transcript, videoId, success}."""
        video_id = validate_video_url(video_url)
        if not self.api_key:
            raise MissingAPIKey("Groq", "GROQ_API_KEY")
        logger.info("Starting transcription for video: %s", video_id)

        audio_path = self._download_audio(video_url, video_id)
        try:
            text = self._transcribe_file(audio_path, video_id)
        finally:
            self._cleanup(audio_path)

        logger.info("Transcription completed for %s", video_id)
        return {"transcript": text, "videoId": video_id, "success": True}

    def _download_audio(self, video_url: str, video_id: str) -> str:
        os.makedirs(self.audio_dir, exist_ok=True)
        opts = {
            "format": "bestaudio/best",
            "postprocessors": [
                {
                    "key": "FFmpegExtractAudio",
                    "preferredcodec": "mp3",
                    "preferredquality": "0",
                }
            ],
            "outtmpl": os.path.join(self.audio_dir, f"{video_id}.%(ext)s"),
            "socket_timeout": DOWNLOAD_TIMEOUT,
            "noplaylist": True,
            "quiet": True,
        }
        logger.info("Downloading audio for %s", video_id)
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                ydl.download([video_url])
        except yt_dlp.utils.DownloadError as exc:
            logger.error("Download error for %s: %s", video_id, exc)
            raise DownloadFailed(DOWNLOAD_ERROR) from exc

        audio_path = os.path.join(self.audio_dir, f"{video_id}.mp3")
        if not os.path.exists(audio_path):
            raise DownloadFailed("Failed to read downloaded audio file")
        return audio_path

    def _transcribe_file(self, audio_path: str, video_id: str) -> str:
        client = Groq(api_key=self.api_key)
        logger.info("Transcribing audio with Groq Whisper...")
        try:
            with open(audio_path, "rb") as f:
                result = client.audio.transcriptions.create(
                    file=(f"{video_id}.mp3", f.read()),
                    model=WHISPER_MODEL,
                    language="en",
                    response_format="text",
                )
        except Exception as exc:
            raise TranscriptionFailed(f"Transcription failed: {exc}") from exc
        # text format comes back as a plain string; json formats carry .text
        if isinstance(result, str):
            return result.strip()
        return str(getattr(result, "text", "") or "").strip()

    @staticmethod
    def _cleanup(path: str) -> None:
        try:
            os.remove(path)
            logger.debug("Audio file cleaned up: %s", path)
        except OSError as exc:
            logger.warning("Failed to clean up audio file %s: %s", path, exc)


__all__ = ["Transcriber", "extract_video_id", "validate_video_url"]
