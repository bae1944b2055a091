import threading

from taskboard.auth.sessions import SessionRegistry


def test_issue_and_resolve():
    reg = SessionRegistry()
    token = reg.issue("acc-1", "user")
    s = reg.resolve(token)
    assert s is not None
    assert s.account_id == "acc-1"
    assert s.role == "user"
    assert s.token == token
    assert s.issued_at > 0
    # Lookups have no side effects.
    assert reg.resolve(token) == s


def test_unknown_and_blank_tokens():
    reg = SessionRegistry()
    assert reg.resolve("nope") is None
    assert reg.resolve("") is None
    assert reg.resolve(None) is None


def test_tokens_unique_per_issue():
    reg = SessionRegistry()
    a = reg.issue("acc-1", "user")
    b = reg.issue("acc-1", "user")
    assert a != b
    assert len(reg) == 2


def test_concurrent_issue():
    reg = SessionRegistry()
    tokens = []
    lock = threading.Lock()

    def worker(i: int) -> None:
        for _ in range(50):
            t = reg.issue(f"acc-{i}", "user")
            with lock:
                tokens.append(t)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(tokens)) == 400
    assert len(reg) == 400
    assert all(reg.resolve(t) is not None for t in tokens)
