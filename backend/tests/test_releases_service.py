"""End-to-end tests for release submission and review."""
import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from app.domain import Checklist, FileType, ImageAttachment, ReleaseStatus, ReleaseType
from app.exceptions import MediaUnavailableError, NotFoundError, ValidationError
from app.integrations.storage import StorageError
from app.models.release import ReleaseRecord
from app.services.releases import ReleaseLocks, _release_locks, audio_fingerprint


class TestSubmit:

    @pytest.mark.asyncio
    async def test_submit_single(self, service, blobs, single_draft):
        release = await service.submit(single_draft())

        assert release.status == ReleaseStatus.UNDER_REVIEW
        assert release.checklist == Checklist()
        assert release.purged is False
        assert release.title == "Noite de Verão"
        assert release.main_artist == ["Mc Kevin"]

        track = release.tracks[0]
        assert track.title == "Noite de Verão"
        assert track.artist == ["Mc Kevin", "Dj Guuga"]
        assert track.composer == ["Kevin da Silva"]
        assert track.audio_url == f"/media/audios/{release.id}/{track.id}/noite.wav"
        assert track.audio_hash == audio_fingerprint(b"RIFF-single")

        assert release.cover_file_name == "cover.jpg"
        assert f"capas/{release.id}/cover.jpg" in blobs.blobs

    @pytest.mark.asyncio
    async def test_submit_is_persisted(self, service, single_draft):
        release = await service.submit(single_draft())
        stored = service.get(release.id)

        assert stored.status == ReleaseStatus.UNDER_REVIEW
        assert stored.tracks[0].audio_file_name == "noite.wav"
        assert stored.tracks[0].audio_hash.startswith("sha256-")

    @pytest.mark.asyncio
    async def test_submit_album(self, service, album_draft):
        release = await service.submit(album_draft())

        assert release.type == ReleaseType.ALBUM
        assert release.title == "The End of the Road"
        assert [t.title for t in release.tracks] == ["First Song", "Second Song"]
        assert release.tracks[1].artist == ["Banda do Mar", "Convidado"]
        assert release.tracks[0].isrc == "BRABC2400001"
        assert release.tracks[1].isrc is None
        assert release.tracks[1].lyrics == "la la la"

    @pytest.mark.asyncio
    async def test_submit_other_genre_uses_sub_genre(self, service, single_draft):
        release = await service.submit(single_draft(genre="Other", sub_genre="forró pé de serra"))
        assert release.genre == "Forró Pé de Serra"

    @pytest.mark.asyncio
    async def test_cover_stays_inside_its_release(self, service, blobs, single_draft):
        victim = await service.submit(single_draft())
        other = await service.submit(single_draft(cover=ImageAttachment(
            name=f"../{victim.id}/cover.jpg", data=b"evil", width=3000, height=3000,
        )))

        assert blobs.blobs[f"capas/{victim.id}/cover.jpg"] == b"jpeg-bytes"
        assert blobs.blobs[f"capas/{other.id}/cover.jpg"] == b"evil"
        assert other.cover_file_name == "cover.jpg"

    @pytest.mark.asyncio
    async def test_names_are_trimmed(self, service, single_draft):
        release = await service.submit(single_draft(main_artist=[" kevin ", " "]))

        assert release.main_artist == ["Kevin"]
        assert release.tracks[0].artist == ["Kevin", "Dj Guuga"]
        assert service.get(release.id).main_artist == ["Kevin"]
        assert [name for name in service.known_artists() if "Kevin" in name] == ["Kevin"]

    @pytest.mark.asyncio
    async def test_invalid_draft_writes_nothing(self, service, blobs, db_session, single_draft):
        draft = single_draft(release_date=date.today() + timedelta(days=5))

        with pytest.raises(ValidationError) as exc:
            await service.submit(draft)

        assert exc.value.field == "release_date"
        assert blobs.blobs == {}
        assert db_session.query(ReleaseRecord).count() == 0

    @pytest.mark.asyncio
    async def test_failed_upload_cleans_up(self, service, blobs, db_session, album_draft):
        original = blobs.upload

        async def failing_upload(path, data):
            if path.endswith("02.wav"):
                raise StorageError("bucket unavailable")
            return await original(path, data)

        blobs.upload = failing_upload

        with pytest.raises(StorageError):
            await service.submit(album_draft())

        assert blobs.blobs == {}
        assert len(blobs.deleted) == 2
        assert db_session.query(ReleaseRecord).count() == 0


class TestChecklist:

    @pytest.mark.asyncio
    async def test_status_follows_checklist(self, service, single_draft):
        release = await service.submit(single_draft())

        status = await service.update_checklist(release.id, Checklist(files_verified=True, metadata_verified=True))
        assert status == ReleaseStatus.APPROVED

        status = await service.update_checklist(release.id, Checklist(True, True, True, True))
        assert status == ReleaseStatus.FINALIZED

        stored = service.get(release.id)
        assert stored.status == ReleaseStatus.FINALIZED
        assert stored.checklist.share_in_sent is True

    @pytest.mark.asyncio
    async def test_unticking_moves_status_back(self, service, single_draft):
        release = await service.submit(single_draft())
        await service.update_checklist(release.id, Checklist(True, True, True, True))

        status = await service.update_checklist(release.id, Checklist())
        assert status == ReleaseStatus.NOT_UPLOADED

    @pytest.mark.asyncio
    async def test_finalized_then_purged_keeps_status(self, service, album_draft):
        release = await service.submit(album_draft())
        await service.update_checklist(release.id, Checklist(True, True, True, True))
        await service.purge(release.id)

        stored = service.get(release.id)
        assert stored.status == ReleaseStatus.FINALIZED
        assert stored.purged is True

    @pytest.mark.asyncio
    async def test_unknown_release(self, service):
        with pytest.raises(NotFoundError):
            await service.update_checklist("missing", Checklist())


class TestReleaseLocks:

    @pytest.mark.asyncio
    async def test_locks_are_dropped_after_use(self, service, single_draft):
        release = await service.submit(single_draft())
        for checklist in (Checklist(True), Checklist(True, True), Checklist(True, True, True)):
            await service.update_checklist(release.id, checklist)
        for i in range(50):
            with pytest.raises(NotFoundError):
                await service.purge(f"missing-{i}")

        assert len(_release_locks) == 0

    @pytest.mark.asyncio
    async def test_waiting_caller_keeps_the_lock(self):
        locks = ReleaseLocks()
        order = []
        first_done = asyncio.Event()

        async def first():
            async with locks.hold("r1"):
                order.append("first")
                await first_done.wait()

        async def second():
            async with locks.hold("r1"):
                order.append("second")

        first_task = asyncio.create_task(first())
        await asyncio.sleep(0)
        second_task = asyncio.create_task(second())
        await asyncio.sleep(0)

        assert order == ["first"]
        assert len(locks) == 1

        first_done.set()
        await asyncio.gather(first_task, second_task)

        assert order == ["first", "second"]
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_delete_waits_for_running_purge(self, service, blobs, album_draft):
        release = await service.submit(album_draft())
        original = blobs.delete
        deleting = asyncio.Event()
        resume = asyncio.Event()

        async def slow_delete(path):
            deleting.set()
            await resume.wait()
            await original(path)

        blobs.delete = slow_delete
        purge = asyncio.create_task(service.purge(release.id))
        await deleting.wait()
        delete = asyncio.create_task(service.delete(release.id))
        await asyncio.sleep(0)

        assert not delete.done()
        resume.set()
        await asyncio.gather(purge, delete)

        with pytest.raises(NotFoundError):
            service.get(release.id)
        assert len(_release_locks) == 0


class TestReject:

    @pytest.mark.asyncio
    async def test_reject_appends_reason(self, service, single_draft):
        release = await service.submit(single_draft())
        service.set_admin_notes(release.id, "Called the artist")

        rejected = await service.reject(release.id, "cover has a watermark")

        assert rejected.status == ReleaseStatus.REJECTED
        assert service.get(release.id).admin_notes == "Called the artist\nRejected: cover has a watermark"

    @pytest.mark.asyncio
    async def test_checklist_keeps_rejection(self, service, single_draft):
        release = await service.submit(single_draft())
        await service.reject(release.id)

        status = await service.update_checklist(release.id, Checklist(files_verified=True))

        assert status == ReleaseStatus.REJECTED
        assert service.get(release.id).checklist.files_verified is True

    @pytest.mark.asyncio
    async def test_reopen(self, service, single_draft):
        release = await service.submit(single_draft())
        await service.reject(release.id)

        status = await service.update_checklist(release.id, Checklist(files_verified=True), reopen=True)

        assert status == ReleaseStatus.UNDER_REVIEW


class TestDownloads:

    def test_download_cover(self, service, submitted_album):
        url, entry = service.download(submitted_album.id, FileType.COVER, user="Carla")

        assert url == f"/media/capas/{submitted_album.id}/cover.jpg"
        assert entry.user == "Carla"
        assert entry.file_name == "cover.jpg"

        stored = service.get(submitted_album.id)
        assert stored.downloads == [entry]

    def test_download_audio_default_user(self, service, submitted_album):
        track = submitted_album.tracks[1]
        url, entry = service.download(submitted_album.id, FileType.AUDIO, track.id)

        assert url.endswith(f"/{track.id}/02.wav")
        assert entry.user == "Admin"
        assert entry.file_type == FileType.AUDIO

    def test_downloads_are_appended(self, service, submitted_album):
        service.download(submitted_album.id, FileType.COVER)
        service.download(submitted_album.id, FileType.COVER)
        assert len(service.get(submitted_album.id).downloads) == 2

    def test_unknown_track(self, service, submitted_album):
        with pytest.raises(MediaUnavailableError):
            service.download(submitted_album.id, FileType.AUDIO, "no-such-track")

    def test_purged_media_unavailable(self, service, submitted_album):
        asyncio.run(service.purge(submitted_album.id))

        with pytest.raises(MediaUnavailableError):
            service.download(submitted_album.id, FileType.COVER)
        assert service.get(submitted_album.id).downloads == []


class TestQueries:

    def _set(self, db_session, release_id, **values):
        record = db_session.get(ReleaseRecord, release_id)
        for key, value in values.items():
            setattr(record, key, value)
        db_session.commit()

    def test_views(self, service, db_session, submitted_single, submitted_album):
        self._set(db_session, submitted_single.id, status=ReleaseStatus.FINALIZED.value)

        assert [r.id for r in service.list_releases("active")] == [submitted_album.id]
        assert [r.id for r in service.list_releases("history")] == [submitted_single.id]
        assert len(service.list_releases()) == 2

    def test_filter_by_artist(self, service, db_session, submitted_single, submitted_album):
        assert [r.id for r in service.list_releases(artist="Dj Guuga")] == [submitted_single.id]
        assert [r.id for r in service.list_releases(artist=" banda do mar ")] == [submitted_album.id]
        assert [r.id for r in service.list_releases(artist="convidado")] == [submitted_album.id]
        assert service.list_releases(artist="Kevin") == []
        assert len(service.list_releases(artist="  ")) == 2

        self._set(db_session, submitted_album.id, status=ReleaseStatus.REJECTED.value)
        assert service.list_releases("active", artist="Banda do Mar") == []
        assert [r.id for r in service.list_releases("history", artist="Banda do Mar")] == [submitted_album.id]

    def test_list_newest_first(self, service, db_session, submitted_single, submitted_album):
        self._set(db_session, submitted_single.id, created_at=datetime(2020, 1, 1, tzinfo=timezone.utc))
        assert [r.id for r in service.list_releases()] == [submitted_album.id, submitted_single.id]

    def test_dashboard(self, service, db_session, submitted_single, submitted_album, single_draft):
        third = asyncio.run(service.submit(single_draft()))
        self._set(db_session, submitted_album.id, status=ReleaseStatus.APPROVED.value)
        self._set(db_session, third.id, status=ReleaseStatus.FINALIZED.value)

        stats = service.dashboard()

        assert stats.pending == 1
        assert stats.approved == 1
        assert stats.finalized_this_month == 1

    def test_dashboard_other_month(self, service, db_session, submitted_single):
        self._set(db_session, submitted_single.id, status=ReleaseStatus.FINALIZED.value)
        next_year = date.today().replace(year=date.today().year + 1)
        assert service.dashboard(next_year).finalized_this_month == 0

    def test_genre_counts(self, service, submitted_single, submitted_album, single_draft):
        asyncio.run(service.submit(single_draft(genre="Other", sub_genre="forró")))

        counts = {g.name: g.count for g in service.genre_counts()}

        assert counts["Funk"] == 1
        assert counts["Pop"] == 1
        assert counts["Forró"] == 1
        assert counts["Trap"] == 0
        ordered = [g.count for g in service.genre_counts()]
        assert ordered == sorted(ordered, reverse=True)
