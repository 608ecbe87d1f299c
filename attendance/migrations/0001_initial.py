import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('academics', '0001_initial'),
        ('classes_app', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ScheduleBasedAttendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('date', models.DateField()),
                ('marked_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True, null=True)),
                ('is_locked', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('PRESENT', 'Present'), ('ABSENT', 'Absent'), ('LATE', 'Late'), ('EXCUSED', 'Excused')], max_length=15)),
                ('marked_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('schedule', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_records', to='classes_app.schedule')),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='academics.academicsession')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='students.student')),
            ],
            options={
                'db_table': 'schedule_based_attendance',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['schedule', 'date'], name='sched_att_schedule_date_idx'),
                    models.Index(fields=['student', 'date'], name='sched_att_student_date_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('student', 'schedule', 'date'), name='uniq_schedule_attendance_per_student_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StudentDailyAttendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('date', models.DateField()),
                ('marked_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('notes', models.TextField(blank=True, null=True)),
                ('is_locked', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('PRESENT', 'Present'), ('ABSENT', 'Absent'), ('LATE', 'Late'), ('EXCUSED', 'Excused'), ('HALF_DAY', 'Half Day')], default='ABSENT', max_length=15)),
                ('check_in_time', models.DateTimeField(blank=True, null=True)),
                ('check_out_time', models.DateTimeField(blank=True, null=True)),
                ('class_program', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_attendance', to='classes_app.classprogram')),
                ('marked_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='academics.academicsession')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='students.student')),
            ],
            options={
                'db_table': 'student_daily_attendance',
                'ordering': ['-date', 'class_program', 'student'],
                'indexes': [
                    models.Index(fields=['class_program', 'date'], name='daily_att_class_date_idx'),
                    models.Index(fields=['student', 'date'], name='daily_att_student_date_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('student', 'class_program', 'date'), name='uniq_daily_attendance_per_student_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AttendanceEditRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('attendance_id', models.BigIntegerField()),
                ('attendance_type', models.CharField(choices=[('SCHEDULE_BASED', 'Schedule based'), ('DAILY', 'Daily')], max_length=20)),
                ('proposed_changes', models.JSONField()),
                ('reason', models.TextField()),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')], default='PENDING', max_length=10)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('admin_comment', models.TextField(blank=True, null=True)),
                ('requested_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='attendance_edit_requests', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='reviewed_attendance_edit_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'attendance_edit_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['attendance_id', 'attendance_type'], name='edit_req_attendance_idx'),
                    models.Index(fields=['status'], name='edit_req_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'PENDING')), fields=('attendance_id', 'attendance_type'), name='uniq_pending_edit_request_per_record'),
                ],
            },
        ),
    ]
