# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the Campus Registrar.

Each domain module owns one area of registrar business logic. Services
take the request's Actor, check the access policy first and then work
against the organization-scoped tables.

Domains:
    access: Role resolution and the role/action/resource policy.
    auth: Registration, login, tokens and password hashing.
    organization: Organizations, usage counters and plan limits.
    billing: Subscription plans, plan changes and billing history.
    member: Team members and their roles.
    student: Applicants, students and enrollment status history.
    admission: Admission document types, documents and interviews.
    catalog: Academic levels, programs, colleges and courses.
    curriculum: Curriculum trees of years, semesters and courses.
    numbering: Student and document number formats.
    offering: Course offerings and schedule diffs.
    enrollment: Enrollment, tuition schedules and payments.
    attendance: Faculty attendance and daily time records.
    project: Projects and project templates.
    theme: Organization theme colors.
    admin: Platform admin dashboard.
"""
