"""Web service for the code review assistant."""

import html
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import BaseModel

from codereviewer import __version__
from codereviewer.auth import SUPPORTED_PROVIDERS, SessionContext
from codereviewer.config import auth_configured, load_config
from codereviewer.console import log, warn
from codereviewer.controller import ReviewController
from codereviewer.editor import CodeEditor
from codereviewer.exceptions import (
    AuthNotConfiguredError,
    CodeReviewerError,
    EmptyCodeError,
    ProfileUpdateError,
    ProfileValidationError,
    ReviewInProgressError,
)
from codereviewer.gemini_client import GeminiClient
from codereviewer.language import LANGUAGE_LABELS, SUPPORTED_LANGUAGES
from codereviewer.models import Notice
from codereviewer.profile import ProfileEditor
from codereviewer.review_formatter import EXPORT_FILENAME, EXPORT_MEDIA_TYPE, ReviewFormatter
from codereviewer.supabase_client import SupabaseClient


class EditorUpdate(BaseModel):
    text: str
    selection_start: Optional[int] = None
    selection_end: Optional[int] = None


class LanguageUpdate(BaseModel):
    language: str


class KeyDownEvent(BaseModel):
    key: str
    selection_start: int
    selection_end: Optional[int] = None


class ScrollEvent(BaseModel):
    scroll_top: Optional[int] = None
    scroll_left: Optional[int] = None


class ReviewRequest(BaseModel):
    """Request model for the review endpoint. ``code`` defaults to the editor text."""
    code: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None


def notice_error(status_code: int, error: CodeReviewerError) -> HTTPException:
    """Turn an error into an HTTPException whose detail is a destructive notice."""
    notice = Notice(title=error.title, description=error.description, variant="destructive")
    return HTTPException(status_code=status_code, detail=notice.model_dump())


class CodeReviewService:
    """Service holding the editor, review and session state for one user."""

    def __init__(self, gemini_client: Optional[GeminiClient] = None,
                 session: Optional[SessionContext] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.config = config or load_config()
        self.gemini_client = gemini_client or GeminiClient(model_name=self.config["review"]["model"])
        self.session = session or self._create_session()
        self.editor = CodeEditor()
        self.controller = ReviewController(self.editor, self.gemini_client)
        self.profile_editor = ProfileEditor()
        self.formatter = ReviewFormatter()
        self.start_time = time.time()
        self.app = FastAPI(title="Code Review Assistant", version=__version__, lifespan=self._lifespan)
        self.setup_routes()

    def _create_session(self) -> SessionContext:
        if not auth_configured(self.config):
            warn("SUPABASE_URL / SUPABASE_ANON_KEY not set. Sign-in is disabled.")
            return SessionContext()
        auth = self.config["auth"]
        return SessionContext(SupabaseClient(auth["supabase_url"], auth["supabase_anon_key"]))

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        self.editor.mount()
        try:
            yield
        finally:
            self.editor.unmount()
            await self.session.close()

    def _require_user(self):
        if self.session.configured and self.session.user is None:
            raise HTTPException(
                status_code=401,
                detail=Notice(title="Sign in required", description="Please sign in to continue.",
                              variant="destructive").model_dump(),
            )

    def setup_routes(self):
        """Set up API routes."""

        @self.app.get("/health")
        async def health():
            """Health check endpoint."""
            return {
                "status": "running",
                "model": self.gemini_client.model_name,
                "gemini_configured": self.gemini_client.configured,
                "auth_configured": self.session.configured,
                "uptime": time.time() - self.start_time,
                "timestamp": datetime.now().isoformat(),
            }

        @self.app.get("/", response_class=HTMLResponse)
        async def index():
            return self.render_page()

        # Editor

        @self.app.get("/api/editor")
        async def get_editor():
            return self.editor.state()

        @self.app.put("/api/editor")
        async def update_editor(update: EditorUpdate):
            self.editor.set_text(update.text)
            if update.selection_start is not None:
                self.editor.set_selection(update.selection_start, update.selection_end)
            return self.editor.state()

        @self.app.put("/api/editor/language")
        async def update_language(update: LanguageUpdate):
            try:
                self.editor.set_language(update.language)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self.editor.state()

        @self.app.post("/api/editor/keydown")
        async def key_down(event: KeyDownEvent):
            handled = self.editor.handle_key_down(event.key, event.selection_start, event.selection_end)
            return {"prevent_default": handled, "state": self.editor.state()}

        @self.app.post("/api/editor/scroll")
        async def scroll(event: ScrollEvent):
            self.editor.textarea.scroll_to(event.scroll_top, event.scroll_left)
            return {
                surface.name: {"scroll_top": surface.scroll_top, "scroll_left": surface.scroll_left}
                for surface in (self.editor.textarea, self.editor.overlay, self.editor.gutter)
            }

        # Review

        @self.app.post("/api/review")
        async def review(request: ReviewRequest):
            """Run a review of the submitted code (or the editor text)."""
            self._require_user()
            try:
                result = await self.controller.run(request.code)
            except EmptyCodeError as e:
                raise notice_error(400, e)
            except ReviewInProgressError as e:
                raise notice_error(409, e)
            return {"state": self.controller.presenter_state(), "review": result.to_dict()}

        @self.app.get("/api/review")
        async def get_review():
            review = self.controller.review
            return {
                "state": self.controller.presenter_state(),
                "review": review.to_dict() if review else None,
            }

        @self.app.get("/api/review/export")
        async def export_review():
            if self.controller.review is None:
                raise HTTPException(status_code=404, detail="No review to export")
            content = self.formatter.format_review_markdown(self.controller.review)
            return Response(
                content=content,
                media_type=EXPORT_MEDIA_TYPE,
                headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
            )

        # Auth

        @self.app.get("/auth/login/{provider}")
        async def login(provider: str):
            if provider not in SUPPORTED_PROVIDERS:
                raise HTTPException(status_code=404, detail=f"Unknown provider '{provider}'")
            try:
                url = self.session.sign_in_with_provider(provider, self.config["auth"]["redirect_to"])
            except CodeReviewerError as e:
                raise notice_error(503, e)
            return RedirectResponse(url)

        @self.app.get("/auth/callback")
        async def auth_callback(code: str):
            try:
                await self.session.complete_sign_in(code)
            except CodeReviewerError as e:
                raise notice_error(502, e)
            self.profile_editor.cancel(self.session.profile)
            return RedirectResponse("/", status_code=303)

        @self.app.post("/auth/logout")
        async def logout():
            try:
                await self.session.sign_out()
            except CodeReviewerError as e:
                log(f"Error logging out: {e}", style="red")
                raise HTTPException(
                    status_code=502,
                    detail=Notice(title="Error", description="Failed to log out. Please try again.",
                                  variant="destructive").model_dump(),
                )
            self.profile_editor.cancel(None)
            return Notice(title="Success", description="You have been logged out successfully.")

        @self.app.get("/api/session")
        async def get_session():
            user = self.session.user
            profile = self.session.profile
            return {
                "user": user.model_dump() if user else None,
                "profile": profile.model_dump() if profile else None,
            }

        # Profile

        @self.app.get("/api/profile")
        async def get_profile():
            profile = self.session.profile
            return {
                "profile": profile.model_dump() if profile else None,
                "draft": self.profile_editor.draft.model_dump(),
                "is_editing": self.profile_editor.is_editing,
            }

        @self.app.put("/api/profile")
        async def update_profile(update: ProfileUpdate):
            self._require_user()
            if not self.profile_editor.is_editing:
                self.profile_editor.begin_edit(self.session.profile)
            self.profile_editor.update(**update.model_dump(exclude_none=True))
            try:
                profile = await self.profile_editor.save(self.session)
            except ProfileValidationError as e:
                raise notice_error(400, e)
            except AuthNotConfiguredError as e:
                raise notice_error(503, e)
            except ProfileUpdateError as e:
                raise notice_error(502, e)
            return {
                "profile": profile.model_dump(),
                "notice": Notice(title="Success", description="Profile updated successfully.").model_dump(),
            }

    def render_page(self) -> str:
        """Render the editor and the review panel as a standalone page."""
        editor = self.editor
        gutter = "".join(f'<span class="line-number">{n}</span>' for n in editor.line_numbers)
        options = "".join(
            f'<option value="{lang}"{" selected" if lang == editor.language else ""}>{LANGUAGE_LABELS[lang]}</option>'
            for lang in SUPPORTED_LANGUAGES
        )
        user = self.session.user
        user_name = html.escape((self.session.profile and self.session.profile.full_name) or (user and user.email) or "")
        review_panel = self.formatter.render_html(self.controller.review, loading=self.controller.loading)
        return "\n".join([
            "<!DOCTYPE html>",
            '<html lang="en"><head><meta charset="utf-8"><title>Code Reviewer</title></head><body>',
            f'<header><h1>Code Reviewer</h1><span class="user">{user_name}</span></header>',
            '<main class="code-reviewer">',
            '<section class="code-editor">',
            f'<select name="language">{options}</select>',
            f'<div class="line-numbers">{gutter}</div>',
            f'<pre class="code-highlight" aria-hidden="true"><code class="language-{editor.language}">'
            f"{editor.highlighted_html()}</code></pre>",
            f'<textarea spellcheck="false" placeholder="// Paste your code here for review...">'
            f"{html.escape(editor.text)}</textarea>",
            "</section>",
            review_panel,
            "</main>",
            "</body></html>",
        ])

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """Run the service."""
        host = host or self.config["service"]["host"]
        port = port or self.config["service"]["port"]
        self.formatter.print_info(f"Starting Code Review service on {host}:{port}")
        uvicorn.run(self.app, host=host, port=port)


def main():
    """Main entry point for the service."""
    CodeReviewService().run()


if __name__ == "__main__":
    main()
