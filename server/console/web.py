"""
Admin console for the student record service.

A small Flask app rendering one page: the student table (sortable by every
column, filterable by year and semester) and, when open, the add/edit modal.
Each browser session gets its own StudentConsole; nothing is persisted here,
the record service is the only source of truth.

Run:
    python -m console.web
"""

import logging
import threading
import uuid
from collections import OrderedDict

from flask import Flask, flash, redirect, render_template_string, request, session, url_for

import config
from console.client import RecordServiceClient, ServiceError
from console.state import StudentConsole
from console.table import COLUMNS, ROW_KEY, SEMESTER_FILTERS, YEAR_FILTERS, table_rows

logger = logging.getLogger(__name__)

PAGE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Students</title>
<style>
*{box-sizing:border-box;font-family:Inter,system-ui,Arial}
body{margin:0;min-height:100vh;display:flex;background:#f5f5f5;color:#1f1f1f}
.sider{width:200px;background:#fff;border-right:1px solid #eee}
.sider .brand{height:64px;background:#001529;color:#fff;display:flex;align-items:center;padding:0 20px;font-weight:500;font-size:20px}
.sider a{display:block;padding:10px 24px;color:#1f1f1f;text-decoration:none}
.sider a.active{background:#e6f4ff;color:#1677ff}
.main{flex:1;display:flex;flex-direction:column}
.header{height:64px;background:#001529;color:#fff;display:flex;align-items:center;padding:0 20px;font-weight:500}
.content{margin:24px}
.btn{display:inline-block;padding:6px 15px;border-radius:6px;border:1px solid #d9d9d9;background:#fff;color:#1f1f1f;cursor:pointer;text-decoration:none;font-size:14px}
.btn.primary{background:#1677ff;border-color:#1677ff;color:#fff}
.btn.link{border:none;background:none;color:#1677ff;padding:0 6px}
table{width:100%;border-collapse:collapse;background:#fff;margin-top:24px}
th,td{padding:12px 16px;border-bottom:1px solid #f0f0f0;text-align:left}
th{background:#fafafa;font-weight:600}
th a{color:inherit;text-decoration:none}
.filters{margin-top:16px;display:flex;gap:24px;align-items:center}
.notice{padding:10px 16px;border-radius:6px;margin-bottom:12px}
.notice.success{background:#f6ffed;border:1px solid #b7eb8f}
.notice.error{background:#fff2f0;border:1px solid #ffccc7}
.overlay{position:fixed;inset:0;background:rgba(0,0,0,.45);display:flex;align-items:flex-start;justify-content:center;padding-top:100px}
.modal{background:#fff;border-radius:8px;padding:20px 24px;width:520px}
.modal h3{margin-top:0}
.field{margin-bottom:16px}
.field label{display:block;margin-bottom:6px}
.field label::before{content:"* ";color:#ff4d4f}
.field input{width:100%;padding:6px 11px;border:1px solid #d9d9d9;border-radius:6px}
.field input:disabled{background:#f5f5f5;color:#999}
.field .error{color:#b20000;margin-top:4px}
.empty{color:#999;text-align:center}
</style>
</head>
<body>
<nav class="sider">
  <div class="brand">Student Records</div>
  <a class="active" href="{{ url_for('index') }}">Students</a>
  <a href="#">Lecturers</a>
  <a href="#">Courses</a>
  <a href="#">Batches and Semester</a>
</nav>
<div class="main">
  <div class="header">Students</div>
  <div class="content">
    {% for category, text in get_flashed_messages(with_categories=true) %}
      <div class="notice {{ category }}">{{ text }}</div>
    {% endfor %}

    <a class="btn primary" href="{{ url_for('new_student') }}">Add Student</a>

    <form class="filters" method="get" action="{{ url_for('index') }}">
      {% if sort %}<input type="hidden" name="sort" value="{{ sort }}"><input type="hidden" name="order" value="{{ order }}">{% endif %}
      <span>Year:
        {% for y in year_filters %}
          <label><input type="checkbox" name="year" value="{{ y }}" {% if y in years %}checked{% endif %}> {{ y }}</label>
        {% endfor %}
      </span>
      <span>Semester:
        {% for s in semester_filters %}
          <label><input type="checkbox" name="semester" value="{{ s }}" {% if s in semesters %}checked{% endif %}> {{ s }}</label>
        {% endfor %}
      </span>
      <button class="btn" type="submit">Filter</button>
      <a class="btn" href="{{ url_for('index') }}">Reset</a>
    </form>

    <table>
      <thead>
        <tr>
          {% for title, field, numeric in columns %}
            <th><a href="{{ sort_url(field) }}">{{ title }}{% if sort == field %} {{ '&#9650;'|safe if order == 'ascend' else '&#9660;'|safe }}{% endif %}</a></th>
          {% endfor %}
          <th>Actions</th>
        </tr>
      </thead>
      <tbody>
        {% for student in rows %}
          <tr data-key="{{ student[row_key] }}">
            {% for title, field, numeric in columns %}<td>{{ student[field] if student.get(field) is not none else '' }}</td>{% endfor %}
            <td>
              <a class="btn link" href="{{ url_for('edit_student', email=student[row_key]) }}">Edit</a>
              <form method="post" action="{{ url_for('delete_student', email=student[row_key]) }}" style="display:inline">
                <button class="btn link" type="submit">Delete</button>
              </form>
            </td>
          </tr>
        {% else %}
          <tr><td class="empty" colspan="{{ columns|length + 1 }}">No data</td></tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
</div>

{% if modal.is_open %}
<div class="overlay">
  <div class="modal">
    <h3>{{ modal.title }}</h3>
    <form method="post" action="{{ url_for('save_student') }}" novalidate>
      {% for name, label, kind in fields %}
        <div class="field">
          <label for="{{ name }}">{{ label }}</label>
          <input id="{{ name }}" type="{{ kind }}" name="{{ name }}" value="{{ modal.values[name] if modal.values.get(name) is not none else '' }}"
                 {% if name == 'email' and modal.editing %}disabled{% endif %}>
          {% if modal.errors.get(name) %}<div class="error">{{ modal.errors[name] }}</div>{% endif %}
        </div>
      {% endfor %}
      <button class="btn primary" type="submit">{{ 'Update' if modal.editing else 'Add' }}</button>
      <button class="btn" type="submit" formaction="{{ url_for('cancel_student') }}">Cancel</button>
    </form>
  </div>
</div>
{% endif %}
</body>
</html>
"""

FORM_FIELDS = [
    ("fullName", "Full Name", "text"),
    ("email", "Email", "text"),
    ("year", "Year", "number"),
    ("semester", "Semester", "number"),
]


def _int_args(name):
    values = []
    for raw in request.args.getlist(name):
        try:
            values.append(int(raw))
        except ValueError:
            continue
    return values


def create_app(client=None, max_sessions=None) -> Flask:
    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY

    service = client or RecordServiceClient(config.RECORD_SERVICE_URL)
    limit = max_sessions or config.CONSOLE_SESSION_LIMIT
    # Least recently used first; the oldest session is dropped past the limit.
    consoles = OrderedDict()
    app.extensions["student_consoles"] = consoles
    lock = threading.Lock()

    def current_console() -> StudentConsole:
        console_id = session.get("console_id")
        with lock:
            if console_id in consoles:
                consoles.move_to_end(console_id)
                return consoles[console_id]
            console_id = str(uuid.uuid4())
            session["console_id"] = console_id
            consoles[console_id] = console = StudentConsole(service)
            logger.info(f"Opened console session {console_id}")
            while len(consoles) > limit:
                expired, _ = consoles.popitem(last=False)
                logger.info(f"Dropped console session {expired}")
            return console

    def flash_notifications(console: StudentConsole):
        for note in console.pop_notifications():
            text = f"{note.message}: {note.description}" if note.description else note.message
            flash(text, note.level)

    @app.route("/", methods=["GET"])
    def index():
        console = current_console()
        console.fetch_students()
        flash_notifications(console)

        sort = request.args.get("sort")
        order = request.args.get("order", "ascend")
        years = _int_args("year")
        semesters = _int_args("semester")
        rows = table_rows(console.students, sort=sort, order=order, years=years, semesters=semesters)

        def sort_url(field):
            # ascend -> descend -> unsorted, like clicking a column header repeatedly
            args = {"year": years, "semester": semesters}
            if sort != field:
                args.update(sort=field, order="ascend")
            elif order == "ascend":
                args.update(sort=field, order="descend")
            return url_for("index", **args)

        return render_template_string(
            PAGE,
            rows=rows,
            columns=COLUMNS,
            row_key=ROW_KEY,
            sort=sort,
            order=order,
            years=years,
            semesters=semesters,
            year_filters=YEAR_FILTERS,
            semester_filters=SEMESTER_FILTERS,
            sort_url=sort_url,
            modal=console.modal,
            fields=FORM_FIELDS,
        )

    @app.route("/students/new", methods=["GET"])
    def new_student():
        current_console().open_create()
        return redirect(url_for("index"))

    @app.route("/students/<email>/edit", methods=["GET"])
    def edit_student(email):
        console = current_console()
        student = console.find(email)
        if student is None:
            try:
                student = service.get_student(email)
            except ServiceError as e:
                console.notify("error", "Error fetching students", e.message)
                flash_notifications(console)
                return redirect(url_for("index"))
        console.open_edit(student)
        return redirect(url_for("index"))

    @app.route("/students/save", methods=["POST"])
    def save_student():
        console = current_console()
        values = {name: request.form.get(name) for name, _, _ in FORM_FIELDS if name in request.form}
        console.submit(values)
        flash_notifications(console)
        return redirect(url_for("index"))

    @app.route("/students/cancel", methods=["POST"])
    def cancel_student():
        current_console().cancel()
        return redirect(url_for("index"))

    @app.route("/students/<email>/delete", methods=["POST"])
    def delete_student(email):
        console = current_console()
        console.delete(email)
        flash_notifications(console)
        return redirect(url_for("index"))

    return app


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    create_app().run(host=config.CONSOLE_HOST, port=config.CONSOLE_PORT)
