"""
Transport-level tests: keep-alive, headers and malformed input on a live server.
"""

import http.client
import json
import socket


def raw_exchange(port: int, data: bytes) -> bytes:
    """Send raw bytes and read until the server closes."""
    with socket.create_connection(("127.0.0.1", port), timeout=5) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestHTTPServer:
    """Tests for HTTPServer behaviour seen from a client."""

    def test_binds_ephemeral_port(self, movie_server):
        assert movie_server.port != 0
        assert movie_server.server.is_running

    def test_standard_headers(self, movie_server):
        _, headers, _ = movie_server.request("GET", "/movie/1")

        assert headers["Server"] == "movieserver/1.0"
        assert "Date" in headers
        assert len(headers["X-Request-ID"]) == 8
        assert headers["Connection"] == "close"

    def test_keep_alive_serves_several_requests(self, movie_server):
        conn = http.client.HTTPConnection("127.0.0.1", movie_server.port, timeout=5)
        try:
            body = json.dumps({"name": "Heat", "year": 1995, "was_good": True})
            conn.request("POST", "/movie/", body=body, headers={"Content-Type": "application/json"})
            first = conn.getresponse()
            movie_id = json.loads(first.read())["id"]

            assert first.getheader("Connection") == "keep-alive"

            conn.request("GET", f"/movie/{movie_id}")
            second = conn.getresponse()

            assert second.status == 200
            assert json.loads(second.read())["name"] == "Heat"
        finally:
            conn.close()

    def test_malformed_request_line(self, movie_server):
        response = raw_exchange(movie_server.port, b"NONSENSE\r\n\r\n")

        head, body = response.split(b"\r\n\r\n", 1)
        assert head.startswith(b"HTTP/1.1 400 Bad Request")
        assert b"Connection: close" in head
        assert "error" in json.loads(body)

    def test_unsupported_version(self, movie_server):
        response = raw_exchange(movie_server.port, b"GET /movie/1 HTTP/3.0\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 505")

    def test_oversized_request(self, movie_server, config):
        size = config.max_request_size + 1
        request = (
            b"POST /movie/ HTTP/1.1\r\n"
            b"Content-Type: application/json\r\n"
            + f"Content-Length: {size}\r\n\r\n".encode()
        )

        response = raw_exchange(movie_server.port, request)

        assert response.startswith(b"HTTP/1.1 413")

    def test_http_10_closes(self, movie_server):
        response = raw_exchange(movie_server.port, b"GET /movie/1 HTTP/1.0\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 404")
        assert b"Connection: close" in response
