"""创建学生表 students"""

import sqlalchemy as sa
from alembic import op


revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, comment="主键"),
        sa.Column("name", sa.String(50), nullable=False, comment="学生姓名"),
        sa.Column("age", sa.Integer(), nullable=False, comment="年龄"),
        sa.Column(
            "gender",
            sa.Enum("MALE", "FEMALE", name="student_gender", native_enum=False, length=10),
            nullable=False,
            comment="性别（MALE/FEMALE）",
        ),
        sa.Column("major", sa.String(100), nullable=False, comment="专业"),
        sa.Column("class_name", sa.String(50), nullable=False, comment="班级"),
        sa.Column("email", sa.String(100), nullable=False, comment="邮箱（全局唯一）"),
        sa.Column("create_time", sa.DateTime(), nullable=False, comment="创建时间"),
        sa.Column("update_time", sa.DateTime(), nullable=False, comment="更新时间"),
        sa.UniqueConstraint("email", name="uq_students_email"),
    )
    op.create_index("ix_students_id", "students", ["id"])
    op.create_index("ix_students_major", "students", ["major"])
    op.create_index("ix_students_class_name", "students", ["class_name"])


def downgrade() -> None:
    op.drop_index("ix_students_class_name", table_name="students")
    op.drop_index("ix_students_major", table_name="students")
    op.drop_index("ix_students_id", table_name="students")
    op.drop_table("students")
