import pytest

ENV_VARS = [
    "FRIENDLI_API_KEY",
    "FRIENDLI_MODEL",
    "YOUTUBE_API_KEY",
    "YOUTUBE_TEST_MODE",
    "GROQ_API_KEY",
    "OPENSCRIPT_API_URLS",
    "PROMPTS_STRICT",
    "PROMPTS_VALIDATE_SCHEMA",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    # keep quota state and downloaded audio inside the test's tmp dir
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENSCRIPT_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("OPENSCRIPT_AUDIO_DIR", str(tmp_path / "audio"))
    monkeypatch.setattr("agents.quota.time.sleep", lambda s: None)


class FakeResponse:
    def __init__(self, json_data=None, status_code=200, headers=None, reason=""):
        self._json = json_data
        self.status_code = status_code
        self.headers = headers or {}
        self.reason = reason
        self.text = "" if json_data is None else str(json_data)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


class FakeLLM:
    """Stands in for FriendliClient; replays queued completions."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []
        self.configured = True

    def _next(self):
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    def chat(self, system_prompt, user_message, max_tokens=500):
        self.calls.append(("chat", system_prompt, user_message))
        return self._next()

    def complete(self, prompt, **kwargs):
        self.calls.append(("complete", prompt, kwargs))
        return self._next()


class FakeBackend:
    def __init__(self, videos=None, search_error=None, transcribe_error=None, script_error=None):
        self.videos = videos if videos is not None else []
        self.search_error = search_error
        self.transcribe_error = transcribe_error
        self.script_error = script_error
        self.searches = []
        self.transcribed = []
        self.scripts = []

    def search_videos(self, query, search_type="search"):
        self.searches.append((query, search_type))
        if self.search_error:
            raise self.search_error
        return {"videos": self.videos}

    def transcribe(self, video_url):
        self.transcribed.append(video_url)
        if self.transcribe_error:
            raise self.transcribe_error
        return {"transcript": f"transcript of {video_url}", "videoId": video_url[-11:], "success": True}

    def generate_script(self, input_text, niche, tone, duration):
        self.scripts.append((input_text, niche, tone, duration))
        if self.script_error:
            raise self.script_error
        return {"script": f"SCRIPT[{input_text}]", "hooks": ["hook a", "hook b"]}


def make_video(i, views=1000):
    vid = f"vid{i:08d}"
    return {
        "id": vid,
        "url": f"https://www.youtube.com/watch?v={vid}",
        "caption": f"Video {i}",
        "author": f"Channel {i}",
        "thumbnail": "",
        "views": views,
        "likes": 10,
        "comments": 1,
        "shares": 1,
        "duration": 75,
        "publishedAt": "2024-01-01T00:00:00Z",
    }
