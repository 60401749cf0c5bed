from crm.runtime.events import emit, emitter_scope, get_emitter, set_emitter


class TestEmit:
    def test_noop_without_emitter(self):
        set_emitter(None)
        emit("message", "nothing listens")

    def test_scope_restores_previous(self):
        outer = []
        set_emitter(outer.append)
        try:
            inner = []
            with emitter_scope(inner.append):
                emit("count", "records", resource="deals", count=3, page=1)
            emit("message", "after")
            assert inner[0].count == 3
            assert inner[0].fields == {"page": 1}
            assert [e.message for e in outer] == ["after"]
        finally:
            set_emitter(None)
        assert get_emitter() is None

    def test_emitter_failure_is_ignored(self):
        def broken(_):
            raise RuntimeError("ui went away")

        with emitter_scope(broken):
            emit("message", "still fine")
